from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import quote


class AssetKind(str, Enum):
    CSS = "css"
    JS = "js"


@dataclass(frozen=True)
class AssetReference:
    theme_id: str
    kind: AssetKind
    variant: str
    minified: bool

    @property
    def filename(self) -> str:
        suffix = f".min.{self.kind.value}" if self.minified else f".{self.kind.value}"
        return f"{self.variant}{suffix}"


class ThemeAssetLocator:
    """Locate theme css/js files on disk and build cache-busted URLs for them.

    Nothing is cached: assets only change on deployment, so every lookup
    stats the filesystem again.
    """

    def __init__(self, *, themes_root: Path, app_url: str, release_version: str) -> None:
        self.themes_root = themes_root
        self._app_url = app_url.rstrip("/")
        self._release_version = release_version

    def theme_dir(self, theme_id: str) -> Path:
        return self.themes_root / theme_id

    def theme_url(self, theme_id: str) -> str:
        return f"{self._app_url}/theme/{quote(theme_id)}"

    def locate(self, theme_id: str, file_name: str, kind: AssetKind | str) -> AssetReference | None:
        if not file_name or not theme_id or "/" in file_name:
            return None
        try:
            asset_kind = AssetKind(kind)
        except ValueError:
            return None

        asset_dir = self.theme_dir(theme_id) / asset_kind.value
        for minified in (True, False):
            reference = AssetReference(
                theme_id=theme_id,
                kind=asset_kind,
                variant=file_name,
                minified=minified,
            )
            if (asset_dir / reference.filename).is_file():
                return reference
        return None

    def url_for(self, reference: AssetReference) -> str:
        return (
            f"{self.theme_url(reference.theme_id)}/{reference.kind.value}/"
            f"{quote(reference.filename)}?v={quote(self._release_version)}"
        )

    def asset_url(self, theme_id: str, file_name: str, kind: AssetKind | str) -> str | None:
        reference = self.locate(theme_id, file_name, kind)
        if reference is None:
            return None
        return self.url_for(reference)
