"""File-based cache of compiled templates."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path

from viewkit.exceptions import CacheWriteError
from viewkit.templating.paths import Directory

logger = logging.getLogger(__name__)

COMPILED_SUFFIX = ".j2"


class TemplateCache:
    """Maps template sources to compiled artifacts and decides their freshness.

    Artifact paths are derived from the source *path* only (sha1, sharded into two
    nested two-character directories), so a changed file at the same path is
    detected through modification times, never through its content.

    Writes go through a temporary file in the target directory followed by an
    atomic rename, so a concurrent reader sees either the previous artifact or
    the complete new one.
    """

    def __init__(self, cache_directory: Directory):
        self._directory = cache_directory

    @property
    def directory(self) -> Path:
        return self._directory.path

    def get_compiled_path(self, source_path: str | os.PathLike[str]) -> Path:
        digest = hashlib.sha1(os.fspath(source_path).encode("utf-8")).hexdigest()
        return self.directory / digest[:2] / digest[2:4] / f"{digest}{COMPILED_SUFFIX}"

    def is_stale(
        self, source_path: str | os.PathLike[str], compiled_path: str | os.PathLike[str]
    ) -> bool:
        try:
            compiled_mtime = os.stat(compiled_path).st_mtime_ns
        except FileNotFoundError:
            return True
        return os.stat(source_path).st_mtime_ns > compiled_mtime

    def write(
        self,
        compiled_path: str | os.PathLike[str],
        content: str,
        source_mtime_ns: int | None = None,
    ) -> None:
        """Persist compiled content at ``compiled_path``.

        Args:
            compiled_path: Target artifact path (usually from ``get_compiled_path``).
            content: Compiled template text.
            source_mtime_ns: Modification time of the source. When it is newer than
                the freshly written artifact (a source stamped in the future), the
                artifact's mtime is raised to match so it does not read as stale.

        Raises:
            CacheWriteError: If the directory or the file cannot be written.
        """
        target = Path(compiled_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheWriteError(
                f"Cache subdirectory {str(target.parent)!r} could not be created"
            ) from e

        temp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f".{target.stem}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                handle.write(content)
            os.replace(temp_name, target)
            temp_name = None

            if source_mtime_ns is not None:
                written_mtime = os.stat(target).st_mtime_ns
                if source_mtime_ns > written_mtime:
                    os.utime(target, ns=(source_mtime_ns, source_mtime_ns))
        except OSError as e:
            raise CacheWriteError(f"Failed to write to cache file: {target}") from e
        finally:
            if temp_name is not None:
                try:
                    os.unlink(temp_name)
                except FileNotFoundError:
                    pass

        logger.debug(f"Wrote compiled template {target}")
