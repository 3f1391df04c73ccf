"""Print the asset health report for the configured database."""

import asyncio
import sys

from asset_health.analytics.engine import AssetHealthEngine
from asset_health.analytics.models import KPIFilter
from asset_health.analytics.report import format_health_report
from asset_health.db.asset_store import SqlAssetRepository
from asset_health.db.connection import async_session, engine


async def main(time_range: str | None = None) -> None:
    health = AssetHealthEngine.from_settings(SqlAssetRepository(async_session))
    filters = KPIFilter.from_params({"timeRange": time_range})

    summary, downtime, cost = await asyncio.gather(
        health.health_overview(filters),
        health.downtime_ranking(filters),
        health.maintenance_cost_ranking(filters),
    )
    print(format_health_report(summary, downtime=downtime, cost=cost))
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
