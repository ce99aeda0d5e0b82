"""Map asset identifiers (stylesheets, scripts) to web paths."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from viewkit.exceptions import AssetError
from viewkit.templating.paths import Directory

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "/resources"

# extension -> subfolder of the assets directory
ASSET_FOLDERS: dict[str, str] = {
    ".css": "css",
    ".js": "js",
}

_REMOTE_SCHEMES = ("http://", "https://")


class AssetPathResolver:
    """Resolves an asset name to the path a browser should request.

    Remote ``http(s)://`` URLs are returned unchanged. Local names must be bare
    file names; they are routed into a subfolder by extension and must exist
    under the assets directory.
    """

    def __init__(self, directory: Directory, base_url: str = DEFAULT_BASE_URL):
        self.directory = directory
        self.base_url = base_url.rstrip("/")

    def resolve(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise AssetError("Asset name cannot be empty.")
        if name.lower().startswith(_REMOTE_SCHEMES):
            return name

        if "/" in name or "\\" in name or ".." in name:
            raise AssetError(
                f"Invalid asset name {name!r}: only bare file names are permitted."
            )

        folder = self.folder_for(name)
        local_path = self.directory.path / folder / name
        if not local_path.is_file():
            raise AssetError(f"Asset file not found: {local_path}")

        return f"{self.base_url}/{folder}/{name}"

    @staticmethod
    def folder_for(name: str) -> str:
        suffix = PurePosixPath(name).suffix.lower()
        try:
            return ASSET_FOLDERS[suffix]
        except KeyError:
            raise AssetError(
                f"Unsupported asset type {suffix or '(none)'!r} for {name!r}."
            ) from None

    @staticmethod
    def is_stylesheet(path: str) -> bool:
        return PurePosixPath(path.split("?", 1)[0]).suffix.lower() == ".css"

    @staticmethod
    def is_script(path: str) -> bool:
        return PurePosixPath(path.split("?", 1)[0]).suffix.lower() == ".js"
