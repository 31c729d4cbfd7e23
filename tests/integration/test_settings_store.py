from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from themekit.services import settings_store
from themekit.services.settings_store import UserSettingsStore


@pytest.mark.integration
@pytest.mark.db
@pytest.mark.asyncio
async def test_save_get_and_delete_round_trip(db_session: AsyncSession) -> None:
    key = settings_store.user_setting_key(7, "colorMode")

    assert await settings_store.get_setting(db_session, key) is None

    await settings_store.save_setting(db_session, key, "dark")
    await settings_store.save_setting(db_session, key, "light-leantime")

    assert await settings_store.get_setting(db_session, key) == "light-leantime"
    assert await settings_store.delete_setting(db_session, key) is True
    assert await settings_store.delete_setting(db_session, key) is False
    assert await settings_store.get_setting(db_session, key) is None


@pytest.mark.integration
@pytest.mark.db
@pytest.mark.asyncio
async def test_store_wrapper_scopes_company_settings(db_session: AsyncSession) -> None:
    store = UserSettingsStore(db_session)

    await store.save_setting(settings_store.company_setting_key("logoPath"), "logos/acme.png")

    assert await store.get_setting("companysettings.logoPath") == "logos/acme.png"
    assert await store.get_setting("usersettings.1.logoPath") is None
