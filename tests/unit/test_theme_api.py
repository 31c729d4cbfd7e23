from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tests.unit.fakes import FakeFileResolver, FakeSettingsStore
from themekit.api.deps import (
    get_file_resolver,
    get_optional_session_user,
    get_settings_store,
    get_theme_config,
)
from themekit.auth.session import SessionUser
from themekit.http.middleware import REQUEST_ID_HEADER
from themekit.main import app
from themekit.themes.resolver import ThemeConfig


class Overrides:
    def __init__(self, themes_root: Path) -> None:
        self.store = FakeSettingsStore()
        self.files = FakeFileResolver()
        self.user: SessionUser | None = None
        self.config = ThemeConfig(
            themes_root=themes_root,
            app_url="https://pm.example.test",
            release_version="3.1.4",
        )

    def install(self) -> None:
        app.dependency_overrides[get_settings_store] = lambda: self.store
        app.dependency_overrides[get_file_resolver] = lambda: self.files
        app.dependency_overrides[get_theme_config] = lambda: self.config
        app.dependency_overrides[get_optional_session_user] = lambda: self.user


@pytest.fixture
def overrides(themes_root: Path) -> Iterator[Overrides]:
    app.dependency_overrides.clear()
    current = Overrides(themes_root)
    current.install()
    yield current
    app.dependency_overrides.clear()


def _set_cookie_values(response) -> dict[str, str]:
    values: dict[str, str] = {}
    for header in response.headers.get_list("set-cookie"):
        name, _, rest = header.partition("=")
        values[name] = rest.split(";", 1)[0]
    return values


def test_anonymous_theme_head_uses_defaults(overrides: Overrides) -> None:
    client = TestClient(app)

    response = client.get("/api/v1/theme")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["theme"] == "default"
    assert data["theme_name"] == "Default"
    assert data["theme_version"] == "3.0.0"
    assert data["color_mode"] == "light-leantime"
    assert data["font"] == "roboto"
    assert data["background_type"] == "gradient"
    assert data["style_url"] == (
        "https://pm.example.test/theme/default/css/light-leantime.css?v=3.1.4"
    )
    assert data["js_url"] == "https://pm.example.test/theme/default/js/theme.js?v=3.1.4"
    assert data["logo_url"] == "https://pm.example.test/dist/images/logo.svg"
    assert data["has_company_logo"] is False
    assert "theme" not in _set_cookie_values(response)


def test_anonymous_update_schedules_cookies_without_persisting(overrides: Overrides) -> None:
    client = TestClient(app)

    response = client.put(
        "/api/v1/theme",
        json={"theme": "ocean", "color_mode": "dark", "font": "atkinson"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["theme"] == "ocean"
    assert data["style_url"] == "https://pm.example.test/theme/ocean/css/dark.min.css?v=3.1.4"
    cookies = _set_cookie_values(response)
    assert cookies["theme"] == "ocean"
    assert cookies["colorMode"] == "dark"
    assert cookies["themeFont"] == "atkinson"
    assert overrides.store.values == {}

    follow_up = client.get("/api/v1/theme")

    assert follow_up.json()["data"]["theme"] == "ocean"
    assert follow_up.json()["data"]["font"] == "atkinson"


def test_unknown_theme_update_falls_back_to_default(overrides: Overrides) -> None:
    client = TestClient(app)

    response = client.put("/api/v1/theme", json={"theme": "does-not-exist"})

    assert response.status_code == 200
    assert response.json()["data"]["theme"] == "default"
    assert _set_cookie_values(response)["theme"] == "default"


def test_authenticated_update_is_persisted_and_served_from_session(overrides: Overrides) -> None:
    overrides.user = SessionUser(id=9, email="ada@example.test")
    client = TestClient(app)

    response = client.put("/api/v1/theme", json={"color_mode": "dark"})

    assert response.status_code == 200
    assert overrides.store.values["usersettings.9.colorMode"] == "dark"

    overrides.store.reads.clear()
    follow_up = client.get("/api/v1/theme")

    assert follow_up.json()["data"]["color_mode"] == "dark"
    assert "usersettings.9.colorMode" not in overrides.store.reads


def test_background_update_requires_authentication(overrides: Overrides) -> None:
    client = TestClient(app)

    response = client.put("/api/v1/theme/background", json={"background_type": "gradient"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "auth_required"


def test_background_gradient_clears_image(overrides: Overrides) -> None:
    overrides.user = SessionUser(id=4, email="grace@example.test")
    client = TestClient(app)

    with_image = client.put(
        "/api/v1/theme/background",
        json={"background_image": "https://images.example.test/a.jpg"},
    )
    gradient = client.put("/api/v1/theme/background", json={"background_type": "gradient"})

    assert with_image.json()["data"]["background_type"] == "image"
    assert with_image.json()["data"]["background_image"] == "https://images.example.test/a.jpg"
    assert gradient.json()["data"]["background_type"] == "gradient"
    assert gradient.json()["data"]["background_image"] is None


def test_logo_update_is_admin_only(overrides: Overrides) -> None:
    overrides.user = SessionUser(id=4, email="grace@example.test", is_admin=False)
    client = TestClient(app)

    response = client.put("/api/v1/theme/logo", json={"logo_path": "https://cdn.example.test/a.svg"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"


def test_logo_update_refreshes_session_cache(overrides: Overrides) -> None:
    overrides.user = SessionUser(id=1, email="admin@example.test", is_admin=True)
    client = TestClient(app)

    before = client.get("/api/v1/theme")
    updated = client.put(
        "/api/v1/theme/logo",
        json={"logo_path": "https://cdn.example.test/acme.svg"},
    )

    assert before.json()["data"]["has_company_logo"] is False
    assert updated.json()["data"]["logo_url"] == "https://cdn.example.test/acme.svg"
    assert updated.json()["data"]["has_company_logo"] is True
    assert overrides.store.values["companysettings.logoPath"] == "https://cdn.example.test/acme.svg"


def test_theme_list_and_fonts(overrides: Overrides) -> None:
    client = TestClient(app)

    themes = client.get("/api/v1/themes")
    fonts = client.get("/api/v1/theme/fonts")

    assert sorted(themes.json()["data"]) == ["default", "ocean"]
    assert themes.json()["data"]["ocean"]["name"] == "Ocean"
    assert [font["key"] for font in fonts.json()["data"]] == ["roboto", "atkinson", "shantell"]


def test_invalid_payload_uses_error_envelope(overrides: Overrides) -> None:
    client = TestClient(app)

    response = client.put("/api/v1/theme", json={"font": "x" * 65})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_request_id_is_echoed_in_meta_and_header(overrides: Overrides) -> None:
    client = TestClient(app)

    response = client.get("/api/v1/theme", headers={REQUEST_ID_HEADER: "request-123"})

    assert response.headers[REQUEST_ID_HEADER] == "request-123"
    assert response.json()["meta"]["request_id"] == "request-123"
