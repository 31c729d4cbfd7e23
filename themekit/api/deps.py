from __future__ import annotations

from pathlib import Path

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from themekit.api.errors import ApiException
from themekit.auth.session import SessionUser, get_session_user
from themekit.db.session import get_db_session
from themekit.http.cookies import RequestCookieJar, pending_cookies_for
from themekit.http.session_store import SessionStore
from themekit.services.files import FileResolver
from themekit.services.settings_store import UserSettingsStore
from themekit.settings import settings
from themekit.themes.resolver import PreferenceResolver, ThemeConfig, Translator, untranslated


def get_theme_config() -> ThemeConfig:
    return ThemeConfig(
        themes_root=Path(settings.themes_root),
        app_url=settings.app_url,
        release_version=settings.app_version,
        default_theme=settings.default_theme,
    )


def get_file_resolver() -> FileResolver:
    return FileResolver(
        uploads_root=settings.uploads_root,
        app_url=settings.app_url,
        secret_key=settings.file_url_secret_key,
    )


def get_translator() -> Translator:
    return untranslated


async def get_settings_store(
    db_session: AsyncSession = Depends(get_db_session),
) -> UserSettingsStore:
    return UserSettingsStore(db_session)


def get_optional_session_user(request: Request) -> SessionUser | None:
    return get_session_user(request)


def get_api_current_user(
    session_user: SessionUser | None = Depends(get_optional_session_user),
) -> SessionUser:
    if session_user is None:
        raise ApiException(
            status_code=401,
            code="auth_required",
            message="Authentication required.",
        )
    return session_user


def get_api_admin_user(
    current_user: SessionUser = Depends(get_api_current_user),
) -> SessionUser:
    if not current_user.is_admin:
        raise ApiException(
            status_code=403,
            code="forbidden",
            message="Admin access required.",
        )
    return current_user


def get_preference_resolver(
    request: Request,
    settings_store: UserSettingsStore = Depends(get_settings_store),
    config: ThemeConfig = Depends(get_theme_config),
    files: FileResolver = Depends(get_file_resolver),
    translate: Translator = Depends(get_translator),
    session_user: SessionUser | None = Depends(get_optional_session_user),
) -> PreferenceResolver:
    cookies = RequestCookieJar(
        request.cookies,
        pending_cookies_for(request),
        path=settings.app_base_path,
        max_age=settings.theme_cookie_max_age_days * 24 * 60 * 60,
        secure=settings.session_cookie_secure,
    )
    return PreferenceResolver(
        session=SessionStore(request.session),
        settings_store=settings_store,
        cookies=cookies,
        files=files,
        config=config,
        user_id=session_user.id if session_user is not None else None,
        translate=translate,
    )
