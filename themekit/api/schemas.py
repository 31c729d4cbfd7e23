from __future__ import annotations

from pydantic import BaseModel, Field


class ApiMeta(BaseModel):
    request_id: str | None = None


class ThemeUpdateRequest(BaseModel):
    theme: str | None = Field(default=None, max_length=64)
    color_mode: str | None = Field(default=None, max_length=64)
    font: str | None = Field(default=None, max_length=64)


class BackgroundUpdateRequest(BaseModel):
    background_type: str | None = Field(default=None, max_length=32)
    background_image: str | None = Field(default=None, max_length=2048)


class LogoUpdateRequest(BaseModel):
    logo_path: str | None = Field(default=None, max_length=2048)


class ThemeHeadData(BaseModel):
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


class ThemeHeadEnvelope(BaseModel):
    data: ThemeHeadData
    meta: ApiMeta


class ThemeListEnvelope(BaseModel):
    data: dict[str, dict[str, str]]
    meta: ApiMeta


class FontChoiceData(BaseModel):
    key: str
    label: str
    tooltip: str


class FontListEnvelope(BaseModel):
    data: list[FontChoiceData]
    meta: ApiMeta
