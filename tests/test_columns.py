"""Tests for logical field -> header resolution."""

import pytest

from link_directory.config import ColumnsConfig
from link_directory.core.columns import resolve_columns


def test_matching_ignores_case_and_padding():
    resolution = resolve_columns([" name ", "url"], {"title": ["Name"], "link": [" URL "]})

    # The actual header is returned verbatim so records can be indexed with it
    assert resolution.title == " name "
    assert resolution.link == "url"


def test_first_candidate_in_priority_order_wins():
    resolution = resolve_columns(["Title", "Name"], {"title": ["Name", "Title"]})

    assert resolution.title == "Name"


def test_unmatched_and_undeclared_fields_are_absent():
    resolution = resolve_columns(["Name"], {"title": ["Name"], "link": ["URL"]})

    assert resolution.link is None
    assert resolution.image is None
    assert "link" in resolution.unresolved()
    assert "title" not in resolution.unresolved()


def test_default_candidates_cover_the_published_sheet():
    headers = ["Logo", "Name (with url hyperlinked)", "URL", "Description", "Category"]
    resolution = resolve_columns(headers, ColumnsConfig().as_candidates())

    assert resolution.title == "Name (with url hyperlinked)"
    assert resolution.link == "URL"
    assert resolution.description == "Description"
    assert resolution.categories == "Category"
    assert resolution.image == "Logo"
    assert resolution.main_tag is None
    assert resolution.logo_url is None


def test_desc_header_is_not_a_default_description_candidate():
    resolution = resolve_columns(["name", "Url", "desc"], ColumnsConfig().as_candidates())

    assert resolution.title == "name"
    assert resolution.link == "Url"
    assert resolution.description is None


def test_desc_header_resolves_when_declared():
    columns = ColumnsConfig(description=["Description", "desc"])
    resolution = resolve_columns(["name", "Url", "desc"], columns.as_candidates())

    assert resolution.description == "desc"


def test_unknown_logical_field_is_rejected():
    with pytest.raises(ValueError, match="Unknown logical fields"):
        resolve_columns(["Name"], {"headline": ["Name"]})
