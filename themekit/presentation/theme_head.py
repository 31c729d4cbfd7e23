from __future__ import annotations

from dataclasses import asdict, dataclass

from themekit.themes.keys import DEFAULT_LOGO
from themekit.themes.resolver import PreferenceResolver


@dataclass(frozen=True)
class ThemeHeadViewModel:
    """Values a page layout renders into `<head>` meta tags and asset links."""

    theme: str
    theme_name: str
    theme_version: str
    color_mode: str
    font: str
    background_type: str
    background_image: str | None
    style_url: str | None
    custom_style_url: str | None
    js_url: str | None
    custom_js_url: str | None
    logo_url: str
    has_company_logo: bool
    app_url: str
    release_version: str

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


async def build_theme_head_view_model(
    resolver: PreferenceResolver,
    *,
    app_url: str,
    release_version: str,
) -> ThemeHeadViewModel:
    logo_url = await resolver.get_logo_url()
    return ThemeHeadViewModel(
        theme=await resolver.get_active(),
        theme_name=await resolver.name(),
        theme_version=await resolver.version(),
        color_mode=await resolver.get_color_mode(),
        font=await resolver.get_font(),
        background_type=await resolver.get_background_type(),
        background_image=await resolver.get_background_image(),
        style_url=await resolver.style_url(),
        custom_style_url=await resolver.custom_style_url(),
        js_url=await resolver.js_url(),
        custom_js_url=await resolver.custom_js_url(),
        logo_url=logo_url or f"{app_url.rstrip('/')}{DEFAULT_LOGO}",
        has_company_logo=logo_url is not None,
        app_url=app_url,
        release_version=release_version,
    )
