from __future__ import annotations

import os
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tests.helpers import write_theme
from themekit.db.models import Base


@pytest.fixture
def themes_root(tmp_path: Path) -> Path:
    root = tmp_path / "themes"
    root.mkdir()
    write_theme(
        root,
        "default",
        ini="[general]\nname = Default\nversion = 3.0.0\n",
        assets=("css/light-leantime.css", "css/dark.css", "js/theme.js"),
    )
    write_theme(
        root,
        "ocean",
        ini="[general]\nname = Ocean\nversion = 1.2.0\ndescription = Blue 100%\n",
        assets=(
            "css/light-leantime.css",
            "css/dark.css",
            "css/dark.min.css",
            "css/custom.css",
            "js/theme.min.js",
        ),
    )
    write_theme(root, "broken", ini="name = Broken without a section\n")
    write_theme(root, "nameless", ini="[general]\nversion = 0.1.0\n")
    write_theme(root, "bare", ini=None, assets=("css/light-leantime.css",))
    return root


@pytest_asyncio.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    database_url = os.getenv("TEST_DATABASE_URL")
    if not database_url:
        pytest.skip("TEST_DATABASE_URL is not set")

    engine = create_async_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()
