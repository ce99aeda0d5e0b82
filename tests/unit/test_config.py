from pathlib import Path

import pytest
from pydantic import ValidationError

from viewkit.config import RenderingSettings


def test_defaults(tmp_path):
    settings = RenderingSettings(views_directory=tmp_path, cache_directory=tmp_path / "c")

    assert settings.template_extension == ".html"
    assert settings.assets_directory is None
    assert settings.assets_base_url == "/resources"
    assert settings.use_sandbox is True
    assert settings.strict_undefined is True
    assert settings.page_separator == "\n"
    assert settings.copyright_message == "All rights reserved."
    assert settings.template_memory_cache_size == 128


def test_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("VIEWKIT_VIEWS_DIRECTORY", str(tmp_path / "views"))
    monkeypatch.setenv("VIEWKIT_CACHE_DIRECTORY", str(tmp_path / "cache"))
    monkeypatch.setenv("VIEWKIT_USE_SANDBOX", "false")

    settings = RenderingSettings()

    assert settings.views_directory == tmp_path / "views"
    assert settings.cache_directory == tmp_path / "cache"
    assert settings.use_sandbox is False


def test_reads_dotenv_file(tmp_path):
    Path(".env").write_text(
        "VIEWKIT_VIEWS_DIRECTORY=templates\nVIEWKIT_CACHE_DIRECTORY=.cache\n", encoding="utf-8"
    )
    settings = RenderingSettings()
    assert settings.views_directory == Path("templates")


def test_required_directories():
    with pytest.raises(ValidationError):
        RenderingSettings()


@pytest.mark.parametrize(("raw", "expected"), [("tpl", ".tpl"), (".txt", ".txt"), ("", "")])
def test_extension_is_normalised(tmp_path, raw, expected):
    settings = RenderingSettings(
        views_directory=tmp_path, cache_directory=tmp_path, template_extension=raw
    )
    assert settings.template_extension == expected


def test_base_url_trailing_slash(tmp_path):
    settings = RenderingSettings(
        views_directory=tmp_path, cache_directory=tmp_path, assets_base_url="/static/"
    )
    assert settings.assets_base_url == "/static"


def test_settings_are_frozen(tmp_path):
    settings = RenderingSettings(views_directory=tmp_path, cache_directory=tmp_path)
    with pytest.raises(ValidationError):
        settings.page_separator = ""


def test_negative_memory_cache_is_rejected(tmp_path):
    with pytest.raises(ValidationError):
        RenderingSettings(
            views_directory=tmp_path, cache_directory=tmp_path, template_memory_cache_size=-1
        )
