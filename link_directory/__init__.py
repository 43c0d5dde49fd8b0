"""
Link Directory - filterable directory of community-curated links.

This package loads a published spreadsheet export (CSV), normalizes its
loosely structured rows into canonical entries, and filters them by tag
and free-text query.

Main entry point is the CLI via `link-directory list` command.

Example:
    $ link-directory list --source https://docs.google.com/.../pub?output=csv --tag Art
"""

__all__ = [
    "__version__",
    "Directory",
    "DirectoryLoader",
    "FilterState",
    "build_directory",
    "parse_csv",
    "slugify",
]
__version__ = "0.1.0"

from .core.text import slugify
from .core.types import FilterState
from .input.csv_parser import parse_csv
from .runner import Directory, DirectoryLoader, build_directory
