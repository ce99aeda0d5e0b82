import os

import pytest

from viewkit.exceptions import ConfigurationError, NotFoundError, SecurityError
from viewkit.templating import Directory, TemplatePathResolver


class TestDirectory:
    def test_valid_directory(self, tmp_path):
        directory = Directory(tmp_path)
        assert directory.path == tmp_path.resolve()
        assert os.fspath(directory) == str(tmp_path.resolve())

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_blank_path_is_rejected(self, raw):
        with pytest.raises(ConfigurationError, match="empty"):
            Directory(raw)

    def test_traversal_segment_is_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="traversal"):
            Directory(f"{tmp_path}/views/../other")

    def test_missing_directory_is_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Directory(tmp_path / "missing")

    def test_file_is_rejected(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        with pytest.raises(ConfigurationError):
            Directory(file_path)

    def test_create_makes_missing_directory(self, tmp_path):
        target = tmp_path / "a" / "b"
        Directory(target, create=True)
        assert target.is_dir()

    def test_equality_by_resolved_path(self, tmp_path):
        assert Directory(tmp_path) == Directory(str(tmp_path))
        assert len({Directory(tmp_path), Directory(tmp_path)}) == 1


class TestTemplatePathResolver:
    def test_resolves_with_default_extension(self, path_resolver, write_template):
        expected = write_template("pages/home.html", "x")
        assert path_resolver.resolve("pages/home") == expected.resolve()

    @pytest.mark.parametrize("name", ["pages\\home", "/pages/home", "pages//home"])
    def test_normalises_separators(self, path_resolver, write_template, name):
        expected = write_template("pages/home.html", "x")
        assert path_resolver.resolve(name) == expected.resolve()

    def test_explicit_suffix_is_kept(self, path_resolver, write_template):
        expected = write_template("mail/welcome.txt", "x")
        assert path_resolver.resolve("mail/welcome.txt") == expected.resolve()

    def test_custom_extension(self, views_dir, write_template):
        expected = write_template("pages/home.tpl", "x")
        resolver = TemplatePathResolver(Directory(views_dir), extension=".tpl")
        assert resolver.resolve("pages/home") == expected.resolve()

    @pytest.mark.parametrize(
        "name", ["../secret", "pages/../../secret", "..\\secret", "pages/..", ".."]
    )
    def test_traversal_is_rejected(self, path_resolver, name):
        with pytest.raises(SecurityError):
            path_resolver.resolve(name)

    def test_symlink_escaping_root_is_rejected(self, path_resolver, views_dir, tmp_path):
        outside = tmp_path / "outside.html"
        outside.write_text("secret")
        (views_dir / "link.html").symlink_to(outside)

        with pytest.raises(SecurityError):
            path_resolver.resolve("link")

    def test_missing_template(self, path_resolver):
        with pytest.raises(NotFoundError):
            path_resolver.resolve("pages/missing")

    def test_directory_is_not_a_template(self, path_resolver, views_dir):
        (views_dir / "folder.html").mkdir()
        with pytest.raises(NotFoundError):
            path_resolver.resolve("folder.html")

    @pytest.mark.parametrize("name", ["", "/", "\\"])
    def test_empty_name(self, path_resolver, name):
        with pytest.raises(NotFoundError):
            path_resolver.resolve(name)

    def test_iter_templates(self, path_resolver, write_template):
        write_template("pages/home.html", "x")
        write_template("layout/main.html", "x")
        write_template("mail/welcome.txt", "x")
        write_template(".hidden/skip.html", "x")
        write_template("pages/.draft.html", "x")

        assert list(path_resolver.iter_templates()) == [
            "layout/main",
            "mail/welcome.txt",
            "pages/home",
        ]

    def test_iterated_ids_resolve(self, path_resolver, write_template):
        write_template("pages/home.html", "x")
        write_template("mail/welcome.txt", "x")
        for template_id in path_resolver.iter_templates():
            assert path_resolver.resolve(template_id).is_file()
