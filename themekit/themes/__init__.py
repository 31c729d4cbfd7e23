from themekit.themes.assets import AssetKind, AssetReference, ThemeAssetLocator
from themekit.themes.descriptor import ThemeDescriptor, list_themes, load_descriptor
from themekit.themes.keys import PreferenceKey, ResolvedPreference, Tier
from themekit.themes.resolver import PreferenceResolver, ThemeConfig

__all__ = [
    "AssetKind",
    "AssetReference",
    "PreferenceKey",
    "PreferenceResolver",
    "ResolvedPreference",
    "ThemeAssetLocator",
    "ThemeConfig",
    "ThemeDescriptor",
    "Tier",
    "list_themes",
    "load_descriptor",
]
