from __future__ import annotations

from pathlib import Path


def write_theme(
    themes_root: Path,
    theme_id: str,
    *,
    ini: str | None,
    assets: tuple[str, ...] = (),
) -> Path:
    theme_dir = themes_root / theme_id
    theme_dir.mkdir(parents=True)
    if ini is not None:
        (theme_dir / "theme.ini").write_text(ini, encoding="utf-8")
    for asset in assets:
        path = theme_dir / asset
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("/* fixture */\n", encoding="utf-8")
    return theme_dir
