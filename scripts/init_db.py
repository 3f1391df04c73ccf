"""Create the asset, work-order and maintenance-history tables."""

import asyncio

from asset_health.db.connection import engine
from asset_health.db.models import Base


async def init() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("[init_db] Tables created successfully.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init())
