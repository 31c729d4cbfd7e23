from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import write_theme
from themekit.themes.descriptor import (
    DescriptorParseError,
    ThemeDescriptor,
    is_valid_theme,
    list_themes,
    load_descriptor,
)


def test_load_descriptor_reads_general_section(themes_root: Path) -> None:
    assert load_descriptor(themes_root, "ocean") == ThemeDescriptor(
        id="ocean",
        display_name="Ocean",
        version="1.2.0",
    )


def test_load_descriptor_raises_for_missing_file(themes_root: Path) -> None:
    with pytest.raises(DescriptorParseError):
        load_descriptor(themes_root, "bare")


def test_load_descriptor_raises_for_malformed_file(themes_root: Path) -> None:
    with pytest.raises(DescriptorParseError):
        load_descriptor(themes_root, "broken")


def test_is_valid_theme_needs_directory_and_descriptor(themes_root: Path) -> None:
    assert is_valid_theme(themes_root, "default")
    assert is_valid_theme(themes_root, "broken")
    assert not is_valid_theme(themes_root, "bare")
    assert not is_valid_theme(themes_root, "missing")
    assert not is_valid_theme(themes_root, "")
    assert not is_valid_theme(themes_root, "..")


def test_list_themes_keeps_named_descriptors_only(themes_root: Path) -> None:
    themes = list_themes(themes_root)

    assert list(themes) == ["default", "ocean"]
    assert themes["ocean"] == {
        "name": "Ocean",
        "version": "1.2.0",
        "description": "Blue 100%",
    }


def test_list_themes_ignores_loose_files_and_blank_names(themes_root: Path) -> None:
    (themes_root / "README.txt").write_text("not a theme", encoding="utf-8")
    write_theme(themes_root, "blank", ini="[general]\nname =   \n")

    assert "blank" not in list_themes(themes_root)
    assert "README.txt" not in list_themes(themes_root)


def test_list_themes_returns_empty_mapping_for_missing_root(tmp_path: Path) -> None:
    assert list_themes(tmp_path / "nope") == {}
