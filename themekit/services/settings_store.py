from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from themekit.db.models import Setting

USER_SETTINGS_PREFIX = "usersettings"
COMPANY_SETTINGS_PREFIX = "companysettings"

logger = logging.getLogger(__name__)


def user_setting_key(user_id: int, name: str) -> str:
    return f"{USER_SETTINGS_PREFIX}.{int(user_id)}.{name}"


def company_setting_key(name: str) -> str:
    return f"{COMPANY_SETTINGS_PREFIX}.{name}"


async def get_setting(db_session: AsyncSession, key: str) -> str | None:
    result = await db_session.execute(select(Setting.value).where(Setting.key == key))
    return result.scalar_one_or_none()


async def save_setting(db_session: AsyncSession, key: str, value: str) -> None:
    row = await db_session.get(Setting, key)
    if row is None:
        db_session.add(Setting(key=key, value=value))
    else:
        row.value = value
    await db_session.commit()
    logger.debug("settings.saved", extra={"event": "settings.saved", "key": key})


async def delete_setting(db_session: AsyncSession, key: str) -> bool:
    result = await db_session.execute(delete(Setting).where(Setting.key == key))
    await db_session.commit()
    return bool(result.rowcount)


class UserSettingsStore:
    """Bind the module-level setting functions to one database session."""

    def __init__(self, db_session: AsyncSession) -> None:
        self._db_session = db_session

    async def get_setting(self, key: str) -> str | None:
        return await get_setting(self._db_session, key)

    async def save_setting(self, key: str, value: str) -> None:
        await save_setting(self._db_session, key, value)

    async def delete_setting(self, key: str) -> None:
        await delete_setting(self._db_session, key)
