from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class PreferenceKey(str, Enum):
    THEME = "theme"
    COLOR_MODE = "colorMode"
    FONT = "themeFont"
    BACKGROUND_TYPE = "backgroundType"
    BACKGROUND_IMAGE = "backgroundImage"
    COMPANY_LOGO = "logoPath"


class Tier(str, Enum):
    SESSION = "session"
    PERSISTED_USER_SETTING = "persisted_user_setting"
    COOKIE = "cookie"
    CONFIG_DEFAULT = "config_default"
    HARD_DEFAULT = "hard_default"


DEFAULT_THEME: Final[str] = "default"
DEFAULT_COLOR_MODE: Final[str] = "light-leantime"
DEFAULT_FONT: Final[str] = "roboto"
DEFAULT_BACKGROUND_TYPE: Final[str] = "gradient"
DEFAULT_LOGO: Final[str] = "/dist/images/logo.svg"

BACKGROUND_TYPES: Final[tuple[str, ...]] = ("gradient", "image")

# Session-only key cleared together with the resolved preferences.
COLOR_SCHEME_SESSION_KEY: Final[str] = "usersettings.colorScheme"
LOGO_SESSION_KEY: Final[str] = "companysettings.logoPath"


@dataclass(frozen=True)
class PreferenceDefinition:
    key: PreferenceKey
    default: str | None
    session_key: str | None = None
    cookie_name: str | None = None

    @property
    def setting_name(self) -> str:
        return self.key.value


DEFINITIONS: Final[dict[PreferenceKey, PreferenceDefinition]] = {
    PreferenceKey.THEME: PreferenceDefinition(
        key=PreferenceKey.THEME,
        default=DEFAULT_THEME,
        session_key="usersettings.theme",
        cookie_name="theme",
    ),
    PreferenceKey.COLOR_MODE: PreferenceDefinition(
        key=PreferenceKey.COLOR_MODE,
        default=DEFAULT_COLOR_MODE,
        session_key="usersettings.colorMode",
        cookie_name="colorMode",
    ),
    PreferenceKey.FONT: PreferenceDefinition(
        key=PreferenceKey.FONT,
        default=DEFAULT_FONT,
        session_key="usersettings.themeFont",
        cookie_name="themeFont",
    ),
    PreferenceKey.BACKGROUND_TYPE: PreferenceDefinition(
        key=PreferenceKey.BACKGROUND_TYPE,
        default=DEFAULT_BACKGROUND_TYPE,
    ),
    PreferenceKey.BACKGROUND_IMAGE: PreferenceDefinition(
        key=PreferenceKey.BACKGROUND_IMAGE,
        default=None,
    ),
    PreferenceKey.COMPANY_LOGO: PreferenceDefinition(
        key=PreferenceKey.COMPANY_LOGO,
        default=None,
        session_key=LOGO_SESSION_KEY,
    ),
}


@dataclass(frozen=True)
class ResolvedPreference:
    key: PreferenceKey
    value: str
    source: Tier


@dataclass(frozen=True)
class FontChoice:
    key: str
    label: str
    tooltip: str


FONTS: Final[tuple[FontChoice, ...]] = (
    FontChoice(
        key="roboto",
        label="Roboto",
        tooltip="Designed to be easy to read on a variety of devices.",
    ),
    FontChoice(
        key="atkinson",
        label="Atkinson Hyperlegible",
        tooltip="Atkinson was specifically developed for readers with low vision.",
    ),
    FontChoice(
        key="shantell",
        label="Shantell Sans",
        tooltip=(
            "The shape of the letters and increased spacing makes words less "
            "crowded and easier to read."
        ),
    ),
)
