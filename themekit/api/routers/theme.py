from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from themekit.api.deps import (
    get_api_admin_user,
    get_api_current_user,
    get_optional_session_user,
    get_preference_resolver,
    get_settings_store,
    get_theme_config,
)
from themekit.api.responses import success_payload
from themekit.api.schemas import (
    BackgroundUpdateRequest,
    FontListEnvelope,
    LogoUpdateRequest,
    ThemeHeadEnvelope,
    ThemeListEnvelope,
    ThemeUpdateRequest,
)
from themekit.auth.session import SessionUser
from themekit.presentation.theme_head import build_theme_head_view_model
from themekit.services.settings_store import (
    UserSettingsStore,
    company_setting_key,
    user_setting_key,
)
from themekit.themes.keys import PreferenceKey
from themekit.themes.resolver import PreferenceResolver, ThemeConfig

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api-theme"])


async def _theme_head_payload(
    request: Request,
    resolver: PreferenceResolver,
    config: ThemeConfig,
) -> dict[str, object]:
    view_model = await build_theme_head_view_model(
        resolver,
        app_url=config.app_url,
        release_version=config.release_version,
    )
    return success_payload(request, data=view_model.as_dict())


@router.get("/theme", response_model=ThemeHeadEnvelope)
async def get_theme(
    request: Request,
    resolver: PreferenceResolver = Depends(get_preference_resolver),
    config: ThemeConfig = Depends(get_theme_config),
):
    return await _theme_head_payload(request, resolver, config)


@router.put("/theme", response_model=ThemeHeadEnvelope)
async def update_theme(
    payload: ThemeUpdateRequest,
    request: Request,
    resolver: PreferenceResolver = Depends(get_preference_resolver),
    config: ThemeConfig = Depends(get_theme_config),
    settings_store: UserSettingsStore = Depends(get_settings_store),
    session_user: SessionUser | None = Depends(get_optional_session_user),
):
    applied: dict[PreferenceKey, str] = {}
    if payload.theme is not None:
        applied[PreferenceKey.THEME] = resolver.set_active(payload.theme)
    if payload.color_mode is not None:
        applied[PreferenceKey.COLOR_MODE] = resolver.set_color_mode(payload.color_mode)
    if payload.font is not None:
        applied[PreferenceKey.FONT] = resolver.set_font(payload.font)

    if session_user is not None:
        for key, value in applied.items():
            await settings_store.save_setting(user_setting_key(session_user.id, key.value), value)

    logger.info(
        "api.theme.updated",
        extra={
            "event": "api.theme.updated",
            "user_id": session_user.id if session_user is not None else None,
            "persisted": session_user is not None,
            "preferences": {key.value: value for key, value in applied.items()},
        },
    )
    return await _theme_head_payload(request, resolver, config)


@router.put("/theme/background", response_model=ThemeHeadEnvelope)
async def update_background(
    payload: BackgroundUpdateRequest,
    request: Request,
    resolver: PreferenceResolver = Depends(get_preference_resolver),
    config: ThemeConfig = Depends(get_theme_config),
    current_user: SessionUser = Depends(get_api_current_user),
):
    if payload.background_image:
        await resolver.set_background_image(payload.background_image)
    elif payload.background_type is not None:
        await resolver.set_background_type(payload.background_type)

    logger.info(
        "api.theme.background_updated",
        extra={
            "event": "api.theme.background_updated",
            "user_id": current_user.id,
            "background_type": "image" if payload.background_image else payload.background_type,
        },
    )
    return await _theme_head_payload(request, resolver, config)


@router.put("/theme/logo", response_model=ThemeHeadEnvelope)
async def update_logo(
    payload: LogoUpdateRequest,
    request: Request,
    resolver: PreferenceResolver = Depends(get_preference_resolver),
    config: ThemeConfig = Depends(get_theme_config),
    settings_store: UserSettingsStore = Depends(get_settings_store),
    admin_user: SessionUser = Depends(get_api_admin_user),
):
    key = company_setting_key("logoPath")
    logo_path = (payload.logo_path or "").strip()
    if logo_path:
        await settings_store.save_setting(key, logo_path)
    else:
        await settings_store.delete_setting(key)
    resolver.forget_logo()

    logger.info(
        "api.theme.logo_updated",
        extra={
            "event": "api.theme.logo_updated",
            "user_id": admin_user.id,
            "cleared": not logo_path,
        },
    )
    return await _theme_head_payload(request, resolver, config)


@router.get("/themes", response_model=ThemeListEnvelope)
async def list_installed_themes(
    request: Request,
    resolver: PreferenceResolver = Depends(get_preference_resolver),
):
    return success_payload(request, data=resolver.list_all())


@router.get("/theme/fonts", response_model=FontListEnvelope)
async def list_fonts(
    request: Request,
    resolver: PreferenceResolver = Depends(get_preference_resolver),
):
    return success_payload(
        request,
        data=[asdict(font) for font in resolver.available_fonts()],
    )
