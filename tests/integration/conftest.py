"""Integration-test fixtures (requires running PG + Redis).

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and the Redis pool remain valid across the
entire test session. The schema is rebuilt once per session by the Alembic
migrations, so the tests run against the same constraints and indexes as
production. The whole directory is skipped when either service is
unreachable.
"""

import asyncio
from pathlib import Path

import pytest
import pytest_asyncio
from alembic import command
from alembic.config import Config
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from config.settings import settings
from src.main import app
from src.um_common.database import engine
from src.um_common.redis_client import close_redis, create_redis
from src.um_gateway.auth.jwt_handler import create_access_token

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


def _migrate_from_scratch() -> None:
    """downgrade base + upgrade head; env.py runs its own event loop."""
    cfg = Config(str(ALEMBIC_INI))
    cfg.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))
    cfg.attributes["configure_logger"] = False
    command.downgrade(cfg, "base")
    command.upgrade(cfg, "head")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def live_app():
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"PostgreSQL unavailable: {exc}")

    redis = await create_redis()
    try:
        await redis.ping()
    except Exception as exc:  # noqa: BLE001
        await close_redis(redis)
        pytest.skip(f"Redis unavailable: {exc}")

    await asyncio.to_thread(_migrate_from_scratch)
    # ids restart at 1 after the rebuild; drop user entries cached by earlier runs
    async for key in redis.scan_iter(match=f"{settings.USER_CACHE_PREFIX}*"):
        await redis.delete(key)

    app.state.redis = redis
    yield app
    await close_redis(redis)
    await engine.dispose()


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin_client(live_app) -> AsyncClient:
    """Session-scoped client carrying an admin Bearer token."""
    transport = ASGITransport(app=live_app)
    headers = {"Authorization": f"Bearer {create_access_token(1, 'admin')}"}
    async with AsyncClient(transport=transport, base_url="http://test", headers=headers) as ac:
        yield ac
