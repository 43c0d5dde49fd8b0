"""Tests for YAML configuration loading."""

from pathlib import Path

from link_directory.config import AppConfig, ColumnsConfig, get_feed_url, load_config


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.feed.retries == 0
    assert cfg.view.sort == "source"


def test_load_config_returns_independent_defaults():
    first = load_config(None)
    first.feed.url = "https://changed.example"

    assert load_config(None).feed.url is None


def test_load_config_merges_sections(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "feed:\n"
        "  url: https://sheets.example/pub?output=csv\n"
        "  proxy_url: https://site.example/api/sheet-proxy\n"
        "columns:\n"
        "  description: [Description, desc]\n"
        "view:\n"
        "  sort: az\n"
        "unknown_section:\n"
        "  ignored: true\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.feed.url == "https://sheets.example/pub?output=csv"
    assert cfg.feed.proxy_url == "https://site.example/api/sheet-proxy"
    assert cfg.feed.timeout_seconds == 15.0
    assert cfg.columns.description == ["Description", "desc"]
    assert cfg.columns.title == ColumnsConfig().title
    assert cfg.view.sort == "az"


def test_empty_yaml_file_gives_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()


def test_columns_as_candidates_lists_every_logical_field():
    candidates = ColumnsConfig().as_candidates()

    assert set(candidates) == {
        "title",
        "link",
        "description",
        "categories",
        "main_tag",
        "hidden_tags",
        "logo_url",
        "image",
    }
    assert candidates["title"][0] == "Name (with url hyperlinked)"


def test_feed_url_environment_override(monkeypatch):
    cfg = AppConfig()
    cfg.feed.url = "https://inline.example"

    monkeypatch.delenv("LINK_DIRECTORY_FEED_URL", raising=False)
    assert get_feed_url(cfg.feed) == "https://inline.example"

    monkeypatch.setenv("LINK_DIRECTORY_FEED_URL", " https://env.example ")
    assert get_feed_url(cfg.feed) == "https://env.example"
