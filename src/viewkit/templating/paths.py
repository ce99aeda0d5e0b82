"""Directory validation and template name resolution."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from viewkit.exceptions import ConfigurationError, NotFoundError, SecurityError

logger = logging.getLogger(__name__)

_SEPARATORS = ("/", "\\")


def _split_segments(name: str) -> list[str]:
    normalized = name
    for sep in _SEPARATORS:
        normalized = normalized.replace(sep, "/")
    return [segment for segment in normalized.split("/") if segment]


class Directory:
    """A directory path validated once on construction.

    Checks that the path is non-blank, carries no traversal segment, exists, is a
    directory and is readable. Holders can rely on those properties without
    re-checking on every call.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str], *, create: bool = False):
        raw = os.fspath(path)
        if not raw.strip():
            raise ConfigurationError("Directory path cannot be empty.")
        if ".." in _split_segments(raw):
            raise ConfigurationError(
                f"Invalid directory path {raw!r}: traversal segments are not permitted."
            )

        resolved = Path(raw).expanduser().resolve()
        if create:
            try:
                resolved.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigurationError(f"Directory could not be created: {resolved}") from e

        if not resolved.is_dir():
            raise ConfigurationError(f"Path provided is not a valid directory: {resolved}")
        if not os.access(resolved, os.R_OK):
            raise ConfigurationError(f"Directory is not readable: {resolved}")

        self._path = resolved

    @property
    def path(self) -> Path:
        return self._path

    def __fspath__(self) -> str:
        return str(self._path)

    def __str__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        return f"Directory({str(self._path)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Directory):
            return self._path == other._path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._path)


class TemplatePathResolver:
    """Resolves a logical template name to an absolute source path under one root.

    Template names use ``/`` or ``\\`` as separators and may omit the file suffix,
    in which case ``extension`` is appended. Names containing a ``..`` segment,
    or resolving outside the root, are rejected with ``SecurityError``.
    """

    def __init__(self, views_directory: Directory, extension: str = ".html"):
        self._root = views_directory
        self._extension = extension

    @property
    def root(self) -> Path:
        return self._root.path

    @property
    def extension(self) -> str:
        return self._extension

    def resolve(self, template_id: str) -> Path:
        segments = _split_segments(template_id)
        if ".." in segments:
            raise SecurityError(
                f"Invalid template name {template_id!r}: directory traversal is not allowed."
            )
        if not segments:
            raise NotFoundError(f"Template name {template_id!r} does not name a file.")

        if self._extension and not Path(segments[-1]).suffix:
            segments[-1] = f"{segments[-1]}{self._extension}"

        candidate = self.root.joinpath(*segments)
        resolved = candidate.resolve()
        if not resolved.is_relative_to(self.root):
            raise SecurityError(
                f"Template {template_id!r} resolves outside of the views directory."
            )

        if not resolved.is_file() or not os.access(resolved, os.R_OK):
            raise NotFoundError(f"Template source file not found or not readable: {resolved}")

        return resolved

    def iter_templates(self) -> Iterator[str]:
        """Yield the template id of every file under the root, sorted."""
        for path in sorted(p for p in self.root.rglob("*") if p.is_file()):
            relative = path.relative_to(self.root).as_posix()
            if any(part.startswith(".") for part in relative.split("/")):
                continue
            if self._extension and relative.endswith(self._extension):
                stem = relative[: -len(self._extension)]
                # only strip when resolve() would append the extension back
                if not PurePosixPath(stem).suffix:
                    relative = stem
            yield relative
