"""Asset health analytics engine.

Wires the pure analytics modules to an injected, read-only repository:

    filter -> time window -> repository fetch -> aggregate -> score -> rank

Each call is independent. Per-asset fetches fan out under a semaphore and
every repository call runs under an optional deadline. Repository errors
and timeouts propagate to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Mapping, Protocol, TypeVar

from asset_health.analytics import ranking
from asset_health.analytics.fuzzy_match import DEFAULT_SUGGESTION_LIMIT, normalize_code, rank_suggestions
from asset_health.analytics.health_score import score_asset
from asset_health.analytics.models import (
    Asset,
    AssetFilter,
    AssetMetrics,
    AssetRecords,
    CodeValidation,
    DateWindow,
    HealthMetricsSummary,
    KPIFilter,
    MaintenanceHistoryEntry,
    parse_limit,
)
from asset_health.analytics.record_aggregator import aggregate_records
from asset_health.analytics.time_window import resolve_time_window

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FETCH_CONCURRENCY = 8


class AssetRepository(Protocol):
    """Read-only persistence capability consumed by the engine."""

    async def query_assets(
        self, asset_filter: AssetFilter, window: DateWindow,
    ) -> list[AssetRecords]: ...

    async def query_maintenance_history(
        self, asset_id: str, window: DateWindow,
    ) -> list[MaintenanceHistoryEntry]: ...

    async def count_assets(self, asset_filter: AssetFilter, active_only: bool = False) -> int: ...

    async def query_suggestion_candidates(
        self, text: str, location: str | None, is_active: bool | None, limit: int,
    ) -> list[Asset]: ...

    async def query_code_matches(
        self, text: str, location: str | None, is_active: bool | None, limit: int,
    ) -> list[Asset]: ...

    async def find_asset_by_exact_code(self, code: str) -> Asset | None: ...


FilterInput = KPIFilter | Mapping[str, Any] | None


def _as_filter(filters: FilterInput) -> KPIFilter:
    if isinstance(filters, KPIFilter):
        return filters
    return KPIFilter.from_params(filters)


def _lookup_limit(limit: Any) -> int:
    return parse_limit(limit) or DEFAULT_SUGGESTION_LIMIT


async def _gather_or_cancel(*awaitables: Awaitable[Any]) -> list[Any]:
    """Like ``asyncio.gather`` but cancels the remaining children when one fails."""
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class AssetHealthEngine:
    """KPI views, health overview and code lookup over an ``AssetRepository``.

    Args:
        repository: Read-only data source.
        fetch_concurrency: Max in-flight per-asset fetches.
        fetch_timeout: Seconds allowed per repository call (None disables).
        clock: Returns "now" for named time ranges.
    """

    def __init__(
        self,
        repository: AssetRepository,
        fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY,
        fetch_timeout: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._fetch_concurrency = max(1, fetch_concurrency)
        self._fetch_timeout = fetch_timeout or None
        self._clock = clock

    @classmethod
    def from_settings(cls, repository: AssetRepository) -> AssetHealthEngine:
        from config.settings import settings

        return cls(
            repository,
            fetch_concurrency=settings.kpi_fetch_concurrency,
            fetch_timeout=settings.kpi_fetch_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    async def collect_metrics(self, filters: FilterInput = None) -> list[AssetMetrics]:
        """Scored metrics for every asset matching the filter, in fetch order."""
        kpi_filter = _as_filter(filters)
        now = self._clock() if self._clock else None
        window = resolve_time_window(kpi_filter, now=now)

        records = await self._call(
            "query_assets", self._repository.query_assets(kpi_filter.asset_filter, window),
        )
        await self._load_missing_history(records, window)

        metrics = [score_asset(aggregate_records(r)) for r in records]
        logger.debug(
            "Computed metrics for %d assets (window %s -> %s)",
            len(metrics), window.gte, window.lte,
        )
        return metrics

    async def downtime_statistics(self, filters: FilterInput = None) -> list[AssetMetrics]:
        """Unranked per-asset downtime metrics."""
        return await self.collect_metrics(filters)

    async def downtime_ranking(self, filters: FilterInput = None) -> list[AssetMetrics]:
        return await self._view(ranking.DOWNTIME, filters)

    async def fault_frequency_ranking(self, filters: FilterInput = None) -> list[AssetMetrics]:
        return await self._view(ranking.FAULT_FREQUENCY, filters)

    async def maintenance_cost_ranking(self, filters: FilterInput = None) -> list[AssetMetrics]:
        return await self._view(ranking.MAINTENANCE_COST, filters)

    async def performance_ranking(self, filters: FilterInput = None) -> list[AssetMetrics]:
        return await self._view(ranking.PERFORMANCE, filters)

    async def critical_assets(self, filters: FilterInput = None) -> list[AssetMetrics]:
        return await self._view(ranking.CRITICAL, filters)

    async def health_overview(self, filters: FilterInput = None) -> HealthMetricsSummary:
        """Asset counts plus health statistics over a top-100 performance sample."""
        kpi_filter = _as_filter(filters)
        asset_filter = kpi_filter.asset_filter

        total, active, metrics = await _gather_or_cancel(
            self._call("count_assets", self._repository.count_assets(asset_filter)),
            self._call(
                "count_assets", self._repository.count_assets(asset_filter, active_only=True),
            ),
            self.collect_metrics(kpi_filter),
        )
        sample = ranking.performance_ranking(metrics, ranking.HEALTH_SAMPLE_SIZE)
        summary = ranking.health_overview(sample, total_assets=total, active_assets=active)
        logger.debug(
            "Health overview: %d assets, %d active, %d with issues",
            summary.total_assets, summary.active_assets, summary.assets_with_issues,
        )
        return summary

    async def _view(self, policy: ranking.ViewPolicy, filters: FilterInput) -> list[AssetMetrics]:
        kpi_filter = _as_filter(filters)
        metrics = await self.collect_metrics(kpi_filter)
        result = ranking.apply_view(policy, metrics, kpi_filter.limit)
        logger.debug("%s view: %d of %d assets", policy.name, len(result), len(metrics))
        return result

    # ------------------------------------------------------------------
    # Code lookup
    # ------------------------------------------------------------------

    async def validate_asset_code(self, code: str | None) -> CodeValidation:
        """Exact, case-sensitive lookup of the trimmed code."""
        trimmed = normalize_code(code)
        if trimmed is None:
            return CodeValidation(exists=False)

        asset = await self._call(
            "find_asset_by_exact_code", self._repository.find_asset_by_exact_code(trimmed),
        )
        logger.debug("Asset code validation: %s exists=%s", trimmed, asset is not None)
        return CodeValidation(exists=asset is not None, asset=asset)

    async def asset_suggestions(
        self,
        text: str | None,
        location: str | None = None,
        is_active: bool | None = None,
        limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> list[Asset]:
        """Code/name candidates ordered by fuzzy match score."""
        needle = normalize_code(text)
        if needle is None:
            return []

        candidates = await self._call(
            "query_suggestion_candidates",
            self._repository.query_suggestion_candidates(
                needle, location, is_active, _lookup_limit(limit),
            ),
        )
        suggestions = rank_suggestions(candidates, needle)
        logger.debug("Asset suggestions for %r: %d results", needle, len(suggestions))
        return suggestions

    async def search_assets_by_code(
        self,
        partial_code: str | None,
        location: str | None = None,
        is_active: bool | None = None,
        limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> list[Asset]:
        """Assets whose code contains ``partial_code``, in code/name order."""
        needle = normalize_code(partial_code)
        if needle is None:
            return []

        assets = await self._call(
            "query_code_matches",
            self._repository.query_code_matches(
                needle, location, is_active, _lookup_limit(limit),
            ),
        )
        logger.debug("Asset code search for %r: %d results", needle, len(assets))
        return assets

    # ------------------------------------------------------------------
    # Fetch helpers
    # ------------------------------------------------------------------

    async def _load_missing_history(self, records: list[AssetRecords], window: DateWindow) -> None:
        pending = [r for r in records if r.maintenance_history is None]
        if not pending:
            return

        semaphore = asyncio.Semaphore(self._fetch_concurrency)

        async def load(record: AssetRecords) -> None:
            async with semaphore:
                record.maintenance_history = await self._call(
                    "query_maintenance_history",
                    self._repository.query_maintenance_history(record.asset.id, window),
                )

        await _gather_or_cancel(*[load(r) for r in pending])
        logger.debug("Fetched maintenance history for %d assets", len(pending))

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        if self._fetch_timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self._fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning("Repository call %s timed out after %.1fs", operation, self._fetch_timeout)
            raise
