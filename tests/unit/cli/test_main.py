import json

import pytest
import yaml
from typer.testing import CliRunner

from viewkit.cli.main import app


class TestViewkitCLI:
    """Test the viewkit command line."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def dirs(self, template_tree, cache_dir):
        return ["--views", str(template_tree), "--cache", str(cache_dir)]

    def test_compile(self, runner, dirs):
        result = runner.invoke(app, ["compile", "partial/sidebar", *dirs])

        assert result.exit_code == 0
        assert result.stdout == "<aside>{{ (label)|e }}</aside>"

    def test_render_with_inline_data(self, runner, dirs):
        result = runner.invoke(
            app, ["render", "partial/sidebar", "--data", json.dumps({"label": "Hi"}), *dirs]
        )

        assert result.exit_code == 0
        assert result.stdout == "<aside>Hi</aside>"

    def test_render_with_yaml_data_file(self, runner, dirs, tmp_path):
        data_file = tmp_path / "data.yaml"
        data_file.write_text(yaml.safe_dump({"label": "From YAML"}))

        result = runner.invoke(
            app, ["render", "partial/sidebar", "--data-file", str(data_file), *dirs]
        )

        assert result.exit_code == 0
        assert result.stdout == "<aside>From YAML</aside>"

    def test_inline_data_overrides_file(self, runner, dirs, tmp_path):
        data_file = tmp_path / "data.json"
        data_file.write_text(json.dumps({"label": "file"}))

        result = runner.invoke(
            app,
            [
                "render",
                "partial/sidebar",
                "--data-file",
                str(data_file),
                "--data",
                '{"label": "inline"}',
                *dirs,
            ],
        )

        assert result.exit_code == 0
        assert result.stdout == "<aside>inline</aside>"

    def test_render_invalid_json(self, runner, dirs):
        result = runner.invoke(app, ["render", "partial/sidebar", "--data", "{not json", *dirs])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_render_missing_template(self, runner, dirs):
        result = runner.invoke(app, ["render", "pages/missing", *dirs])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_render_runtime_error_exits_cleanly(self, runner, dirs, write_template):
        write_template("ratio.html", "{{ a / b }}")

        result = runner.invoke(app, ["render", "ratio", "--data", '{"a": 1, "b": 0}', *dirs])

        assert result.exit_code == 1
        assert "division by zero" in result.output
        assert not isinstance(result.exception, ZeroDivisionError)

    def test_render_traversal_is_rejected(self, runner, dirs):
        result = runner.invoke(app, ["compile", "../secret", *dirs])

        assert result.exit_code == 1
        assert "traversal" in result.output

    def test_warm(self, runner, dirs):
        result = runner.invoke(app, ["warm", *dirs])

        assert result.exit_code == 0
        assert "partial/sidebar" in result.stdout
        assert "6 compiled, 0 failed" in result.stdout

    def test_warm_reports_failures(self, runner, dirs, write_template):
        write_template("pages/bad.html", "@foreach(items)x@endforeach")

        result = runner.invoke(app, ["warm", *dirs])

        assert result.exit_code == 1
        assert "1 failed" in result.stdout

    def test_directories_from_environment(self, runner, template_tree, cache_dir, monkeypatch):
        monkeypatch.setenv("VIEWKIT_VIEWS_DIRECTORY", str(template_tree))
        monkeypatch.setenv("VIEWKIT_CACHE_DIRECTORY", str(cache_dir))

        result = runner.invoke(app, ["compile", "layout/main"])

        assert result.exit_code == 0
        assert result.stdout == "<main></main>"

    def test_missing_settings(self, runner):
        result = runner.invoke(app, ["compile", "layout/main"])

        assert result.exit_code == 1
        assert "VIEWKIT_" in result.output
