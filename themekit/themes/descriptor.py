"""Reading `theme.ini` descriptors from the themes root."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DESCRIPTOR_FILENAME: Final[str] = "theme.ini"
GENERAL_SECTION: Final[str] = "general"

logger = logging.getLogger(__name__)


class DescriptorParseError(ValueError):
    """Raised when a theme descriptor is missing or cannot be parsed."""


@dataclass(frozen=True)
class ThemeDescriptor:
    id: str
    display_name: str
    version: str


def descriptor_path(themes_root: Path, theme_id: str) -> Path:
    return themes_root / theme_id / DESCRIPTOR_FILENAME


def is_valid_theme(themes_root: Path, theme_id: str) -> bool:
    if not theme_id or theme_id in {".", ".."} or "/" in theme_id or "\\" in theme_id:
        return False
    return (themes_root / theme_id).is_dir() and descriptor_path(themes_root, theme_id).is_file()


def _parse(path: Path) -> configparser.ConfigParser:
    # Raw values: theme names may legitimately contain `%`.
    parser = configparser.ConfigParser(interpolation=None)
    try:
        with path.open("r", encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, UnicodeDecodeError, configparser.Error) as exc:
        raise DescriptorParseError(f"Cannot read theme descriptor {path}: {exc}") from exc
    return parser


def read_general_section(path: Path) -> dict[str, str]:
    parser = _parse(path)
    if not parser.has_section(GENERAL_SECTION):
        return {}
    return dict(parser.items(GENERAL_SECTION))


def load_descriptor(themes_root: Path, theme_id: str) -> ThemeDescriptor:
    """Parse the descriptor of `theme_id`.

    Raises DescriptorParseError when the file is absent or malformed. Missing
    keys are returned as empty strings so callers can choose their fallback.
    """
    path = descriptor_path(themes_root, theme_id)
    if not path.is_file():
        raise DescriptorParseError(f"Configuration file for theme {theme_id} not found")
    general = read_general_section(path)
    return ThemeDescriptor(
        id=theme_id,
        display_name=general.get("name", "").strip(),
        version=general.get("version", "").strip(),
    )


def list_themes(themes_root: Path) -> dict[str, dict[str, str]]:
    themes: dict[str, dict[str, str]] = {}
    if not themes_root.is_dir():
        return themes

    for theme_dir in sorted(themes_root.iterdir()):
        if not theme_dir.is_dir():
            continue
        path = theme_dir / DESCRIPTOR_FILENAME
        if not path.is_file():
            continue
        try:
            general = read_general_section(path)
        except DescriptorParseError:
            logger.debug(
                "theme.descriptor_skipped",
                extra={"event": "theme.descriptor_skipped", "theme_id": theme_dir.name},
            )
            continue
        if general.get("name", "").strip():
            themes[theme_dir.name] = general
    return themes
