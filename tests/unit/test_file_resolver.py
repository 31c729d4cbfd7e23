from __future__ import annotations

from pathlib import Path

import pytest

from themekit.services.files import FileResolver


@pytest.fixture
def uploads_root(tmp_path: Path) -> Path:
    root = tmp_path / "uploads"
    (root / "logos").mkdir(parents=True)
    (root / "logos" / "acme.png").write_bytes(b"\x89PNG")
    return root


def _resolver(uploads_root: Path, secret_key: str = "test-secret") -> FileResolver:
    return FileResolver(
        uploads_root=uploads_root,
        app_url="https://pm.example.test/",
        secret_key=secret_key,
    )


def test_resolve_url_signs_existing_reference(uploads_root: Path) -> None:
    files = _resolver(uploads_root)

    url = files.resolve_url("logos/acme.png", "public", 1440)

    assert url is not None
    assert url.startswith("https://pm.example.test/files/")
    token = url.rsplit("/", 1)[1]
    assert files.load_reference(token) == "logos/acme.png"


@pytest.mark.parametrize("reference", ["logos/missing.png", "", "../outside.png"])
def test_resolve_url_returns_none_for_unknown_reference(uploads_root: Path, reference: str) -> None:
    assert _resolver(uploads_root).resolve_url(reference, "public", 60) is None


def test_load_reference_rejects_tampered_or_foreign_tokens(uploads_root: Path) -> None:
    url = _resolver(uploads_root, secret_key="one").resolve_url("logos/acme.png", "public", 60)
    assert url is not None
    token = url.rsplit("/", 1)[1]

    assert _resolver(uploads_root, secret_key="two").load_reference(token) is None
    assert _resolver(uploads_root, secret_key="one").load_reference(token + "x") is None


def test_path_for_stays_inside_uploads_root(uploads_root: Path) -> None:
    files = _resolver(uploads_root)

    assert files.path_for("logos/acme.png") == (uploads_root / "logos" / "acme.png").resolve()
    assert files.path_for("../../etc/passwd") is None
