"""Per-request resolution of theme, color mode, font, background and logo.

Lookups walk the tiers session -> persisted user setting -> cookie -> default
and promote whatever they find into the faster tiers. Every failure path
degrades to a default value; rendering a page must never fail because of a
theme preference.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from themekit.http.cookies import RequestCookieJar
from themekit.http.session_store import SessionStore
from themekit.services.settings_store import company_setting_key, user_setting_key
from themekit.themes.assets import AssetKind, ThemeAssetLocator
from themekit.themes.descriptor import (
    DescriptorParseError,
    ThemeDescriptor,
    is_valid_theme,
    list_themes,
    load_descriptor,
)
from themekit.themes.keys import (
    BACKGROUND_TYPES,
    COLOR_SCHEME_SESSION_KEY,
    DEFAULT_BACKGROUND_TYPE,
    DEFAULT_THEME,
    DEFINITIONS,
    FONTS,
    FontChoice,
    PreferenceDefinition,
    PreferenceKey,
    ResolvedPreference,
    Tier,
)

LOGO_URL_TTL_MINUTES: Final[int] = 60 * 24
CUSTOM_CSS: Final[str] = "custom"
CUSTOM_JS: Final[str] = "custom"
DEFAULT_JS: Final[str] = "theme"

_CHAINED_KEYS: Final[frozenset[PreferenceKey]] = frozenset(
    {PreferenceKey.THEME, PreferenceKey.COLOR_MODE, PreferenceKey.FONT}
)
_LOGO: Final[PreferenceDefinition] = DEFINITIONS[PreferenceKey.COMPANY_LOGO]
_LOGO_SESSION_KEY: Final[str] = str(_LOGO.session_key)

logger = logging.getLogger(__name__)

Translator = Callable[[str], str]


class SettingsStore(Protocol):
    async def get_setting(self, key: str) -> str | None: ...

    async def save_setting(self, key: str, value: str) -> None: ...

    async def delete_setting(self, key: str) -> None: ...


class LogoFileResolver(Protocol):
    def resolve_url(self, reference: str, visibility: str, ttl_minutes: int) -> str | None: ...


@dataclass(frozen=True)
class ThemeConfig:
    themes_root: Path
    app_url: str
    release_version: str
    default_theme: str = ""


def untranslated(key: str) -> str:
    return key


class PreferenceResolver:
    def __init__(
        self,
        *,
        session: SessionStore,
        settings_store: SettingsStore,
        cookies: RequestCookieJar,
        files: LogoFileResolver,
        config: ThemeConfig,
        user_id: int | None = None,
        translate: Translator = untranslated,
    ) -> None:
        self._session = session
        self._settings = settings_store
        self._cookies = cookies
        self._files = files
        self._config = config
        self._user_id = user_id
        self._translate = translate
        self._descriptor: ThemeDescriptor | None = None
        self.assets = ThemeAssetLocator(
            themes_root=config.themes_root,
            app_url=config.app_url,
            release_version=config.release_version,
        )

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def _user_key(self, key: PreferenceKey) -> str:
        if self._user_id is None:
            raise RuntimeError(f"{key.value} is a per-user setting and the caller is anonymous")
        return user_setting_key(self._user_id, DEFINITIONS[key].setting_name)

    # -- precedence chain -------------------------------------------------

    async def resolve(self, key: PreferenceKey) -> ResolvedPreference:
        if key not in _CHAINED_KEYS:
            raise ValueError(f"{key.value} is not resolved through the tier chain")
        definition = DEFINITIONS[key]

        if self.is_authenticated and self._session.exists(definition.session_key):
            return ResolvedPreference(
                key=key,
                value=str(self._session.get(definition.session_key)),
                source=Tier.SESSION,
            )

        if self.is_authenticated:
            stored = await self._settings.get_setting(self._user_key(key))
            if stored is not None:
                return ResolvedPreference(
                    key=key,
                    value=self._write(key, stored),
                    source=Tier.PERSISTED_USER_SETTING,
                )

        cookie_value = self._cookies.get(definition.cookie_name)
        if cookie_value is not None:
            return ResolvedPreference(
                key=key,
                value=self._write(key, cookie_value),
                source=Tier.COOKIE,
            )

        if key is PreferenceKey.THEME and self._config.default_theme:
            return ResolvedPreference(
                key=key,
                value=self._write(key, self._config.default_theme),
                source=Tier.CONFIG_DEFAULT,
            )

        return ResolvedPreference(key=key, value=str(definition.default), source=Tier.HARD_DEFAULT)

    async def get_active(self) -> str:
        return (await self.resolve(PreferenceKey.THEME)).value

    async def get_color_mode(self) -> str:
        return (await self.resolve(PreferenceKey.COLOR_MODE)).value

    async def get_font(self) -> str:
        return (await self.resolve(PreferenceKey.FONT)).value

    # -- write path ---------------------------------------------------------

    def normalize_theme(self, theme_id: str) -> str:
        candidate = (theme_id or "").strip()
        if not candidate:
            return DEFAULT_THEME
        if not is_valid_theme(self._config.themes_root, candidate):
            logger.info(
                "theme.invalid_substituted",
                extra={
                    "event": "theme.invalid_substituted",
                    "requested_theme": candidate,
                    "theme": DEFAULT_THEME,
                },
            )
            return DEFAULT_THEME
        return candidate

    def _normalize(self, key: PreferenceKey, value: str) -> str:
        if key is PreferenceKey.THEME:
            return self.normalize_theme(value)
        return value or str(DEFINITIONS[key].default)

    def _write(self, key: PreferenceKey, value: str) -> str:
        definition = DEFINITIONS[key]
        normalized = self._normalize(key, value)
        if self.is_authenticated:
            self._session.set(definition.session_key, normalized)
        self._cookies.queue(definition.cookie_name, normalized)
        return normalized

    def set_active(self, theme_id: str) -> str:
        normalized = self._write(PreferenceKey.THEME, theme_id)
        if self._descriptor is not None and self._descriptor.id != normalized:
            self._descriptor = None
        return normalized

    def set_color_mode(self, color_mode: str) -> str:
        return self._write(PreferenceKey.COLOR_MODE, color_mode)

    def set_font(self, font: str) -> str:
        return self._write(PreferenceKey.FONT, font)

    def clear_cache(self) -> None:
        for key in _CHAINED_KEYS:
            self._session.forget(DEFINITIONS[key].session_key)
        self._session.forget(COLOR_SCHEME_SESSION_KEY)
        self._descriptor = None

    # -- background -----------------------------------------------------------

    async def get_background_type(self) -> str:
        if not self.is_authenticated:
            return DEFAULT_BACKGROUND_TYPE
        stored = await self._settings.get_setting(self._user_key(PreferenceKey.BACKGROUND_TYPE))
        return stored if stored in BACKGROUND_TYPES else DEFAULT_BACKGROUND_TYPE

    async def get_background_image(self) -> str | None:
        if not self.is_authenticated:
            return None
        return await self._settings.get_setting(self._user_key(PreferenceKey.BACKGROUND_IMAGE))

    async def set_background_type(self, background_type: str) -> None:
        if not self.is_authenticated:
            return
        normalized = background_type if background_type in BACKGROUND_TYPES else DEFAULT_BACKGROUND_TYPE
        await self._settings.save_setting(self._user_key(PreferenceKey.BACKGROUND_TYPE), normalized)
        if normalized == DEFAULT_BACKGROUND_TYPE:
            await self._settings.delete_setting(self._user_key(PreferenceKey.BACKGROUND_IMAGE))

    async def set_background_image(self, url: str) -> None:
        if not self.is_authenticated:
            return
        await self._settings.save_setting(self._user_key(PreferenceKey.BACKGROUND_TYPE), "image")
        await self._settings.save_setting(self._user_key(PreferenceKey.BACKGROUND_IMAGE), url)

    # -- company logo -----------------------------------------------------------

    async def get_logo_url(self) -> str | None:
        """Resolve the company logo once per session.

        `False` in the session marks "no logo" so that a missing or
        unresolvable logo is not looked up again until `forget_logo()`.
        """
        cached = self._session.get(_LOGO_SESSION_KEY, "")
        if cached != "":
            return cached or None

        stored = await self._settings.get_setting(company_setting_key(_LOGO.setting_name))
        if not stored:
            self._session.set(_LOGO_SESSION_KEY, False)
            return None

        if stored.startswith("http"):
            self._session.set(_LOGO_SESSION_KEY, stored)
            return stored

        file_url = self._files.resolve_url(stored, "public", LOGO_URL_TTL_MINUTES)
        if file_url is None:
            logger.warning(
                "theme.logo_unresolvable",
                extra={"event": "theme.logo_unresolvable", "reference": stored},
            )
        self._session.set(_LOGO_SESSION_KEY, file_url or False)
        return file_url

    def forget_logo(self) -> None:
        self._session.forget(_LOGO_SESSION_KEY)

    # -- descriptor -----------------------------------------------------------

    async def _active_descriptor(self) -> tuple[str, ThemeDescriptor | None]:
        theme_id = await self.get_active()
        if self._descriptor is not None and self._descriptor.id == theme_id:
            return theme_id, self._descriptor
        try:
            self._descriptor = load_descriptor(self._config.themes_root, theme_id)
        except DescriptorParseError:
            logger.warning(
                "theme.descriptor_unreadable",
                exc_info=True,
                extra={"event": "theme.descriptor_unreadable", "theme": theme_id},
            )
            self._descriptor = None
        return theme_id, self._descriptor

    async def name(self) -> str:
        theme_id, descriptor = await self._active_descriptor()
        if descriptor is not None and descriptor.display_name:
            return descriptor.display_name
        return self._translate(f"theme.{theme_id}.name")

    async def version(self) -> str:
        _, descriptor = await self._active_descriptor()
        return descriptor.version if descriptor is not None else ""

    def list_all(self) -> dict[str, dict[str, str]]:
        return list_themes(self._config.themes_root)

    def available_fonts(self) -> tuple[FontChoice, ...]:
        return FONTS

    # -- asset locations ---------------------------------------------------------

    async def theme_dir(self) -> Path:
        return self.assets.theme_dir(await self.get_active())

    async def theme_url(self) -> str:
        return self.assets.theme_url(await self.get_active())

    def default_dir(self) -> Path:
        return self.assets.theme_dir(DEFAULT_THEME)

    def default_url(self) -> str:
        return self.assets.theme_url(DEFAULT_THEME)

    async def asset_url(self, file_name: str, kind: AssetKind | str) -> str | None:
        return self.assets.asset_url(await self.get_active(), file_name, kind)

    async def style_url(self) -> str | None:
        return await self.asset_url(await self.get_color_mode(), AssetKind.CSS)

    async def custom_style_url(self) -> str | None:
        return await self.asset_url(CUSTOM_CSS, AssetKind.CSS)

    async def js_url(self) -> str | None:
        return await self.asset_url(DEFAULT_JS, AssetKind.JS)

    async def custom_js_url(self) -> str | None:
        return await self.asset_url(CUSTOM_JS, AssetKind.JS)
