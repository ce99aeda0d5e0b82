import hashlib
import os
import time

import pytest

from viewkit.exceptions import CacheWriteError
from viewkit.templating import COMPILED_SUFFIX, Directory, TemplateCache


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "views" / "page.html"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<p>source</p>", encoding="utf-8")
    return path


def _set_mtime(path, seconds: float) -> None:
    ns = int(seconds * 1_000_000_000)
    os.utime(path, ns=(ns, ns))


class TestCompiledPath:
    def test_path_is_sharded_by_digest(self, template_cache, source_file):
        digest = hashlib.sha1(str(source_file).encode("utf-8")).hexdigest()
        compiled = template_cache.get_compiled_path(source_file)

        assert compiled.name == f"{digest}{COMPILED_SUFFIX}"
        assert compiled.parent.name == digest[2:4]
        assert compiled.parent.parent.name == digest[:2]
        assert compiled.parent.parent.parent == template_cache.directory

    def test_path_is_deterministic(self, template_cache, source_file):
        assert template_cache.get_compiled_path(source_file) == template_cache.get_compiled_path(
            str(source_file)
        )

    def test_different_sources_get_different_paths(self, template_cache, tmp_path):
        assert template_cache.get_compiled_path(tmp_path / "a.html") != (
            template_cache.get_compiled_path(tmp_path / "b.html")
        )


class TestStaleness:
    def test_missing_artifact_is_stale(self, template_cache, source_file):
        compiled = template_cache.get_compiled_path(source_file)
        assert template_cache.is_stale(source_file, compiled)

    def test_fresh_artifact_is_not_stale(self, template_cache, source_file):
        _set_mtime(source_file, time.time() - 60)
        compiled = template_cache.get_compiled_path(source_file)
        template_cache.write(compiled, "compiled")

        assert not template_cache.is_stale(source_file, compiled)

    def test_newer_source_is_stale(self, template_cache, source_file):
        compiled = template_cache.get_compiled_path(source_file)
        template_cache.write(compiled, "compiled")
        _set_mtime(compiled, time.time() - 120)
        _set_mtime(source_file, time.time() - 60)

        assert template_cache.is_stale(source_file, compiled)

    def test_equal_mtimes_are_fresh(self, template_cache, source_file):
        compiled = template_cache.get_compiled_path(source_file)
        template_cache.write(compiled, "compiled")
        stamp = time.time() - 30
        _set_mtime(source_file, stamp)
        _set_mtime(compiled, stamp)

        assert not template_cache.is_stale(source_file, compiled)

    def test_future_source_mtime_is_carried_to_artifact(self, template_cache, source_file):
        _set_mtime(source_file, time.time() + 3600)
        source_mtime_ns = source_file.stat().st_mtime_ns
        compiled = template_cache.get_compiled_path(source_file)

        template_cache.write(compiled, "compiled", source_mtime_ns=source_mtime_ns)

        assert compiled.stat().st_mtime_ns >= source_mtime_ns
        assert not template_cache.is_stale(source_file, compiled)


class TestWrite:
    def test_write_creates_shard_directories(self, template_cache, source_file):
        compiled = template_cache.get_compiled_path(source_file)
        template_cache.write(compiled, "hello")

        assert compiled.read_text(encoding="utf-8") == "hello"

    def test_write_overwrites_in_place(self, template_cache, source_file):
        compiled = template_cache.get_compiled_path(source_file)
        template_cache.write(compiled, "first")
        template_cache.write(compiled, "second")

        assert compiled.read_text(encoding="utf-8") == "second"

    def test_write_leaves_no_temporary_files(self, template_cache, source_file):
        compiled = template_cache.get_compiled_path(source_file)
        template_cache.write(compiled, "hello")

        assert [p.name for p in compiled.parent.iterdir()] == [compiled.name]

    def test_unwritable_location_raises_cache_write_error(self, template_cache):
        blocker = template_cache.directory / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(CacheWriteError) as exc_info:
            template_cache.write(blocker / "nested" / "x.j2", "content")

        assert isinstance(exc_info.value, OSError)


def test_cache_directory_is_created(tmp_path):
    target = tmp_path / "new" / "cache"
    cache = TemplateCache(Directory(target, create=True))
    assert cache.directory == target.resolve()
    assert target.is_dir()
