"""SQL-backed read repository for the asset health engine."""
from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from asset_health.analytics.models import (
    COMPLETED_STATUS,
    Asset,
    AssetFilter,
    AssetRecords,
    DateWindow,
    MaintenanceHistoryEntry,
    WorkOrderSpan,
)
from asset_health.db.models import EquipmentAsset, MaintenanceHistory, WorkOrder

logger = logging.getLogger(__name__)


def _asset_conditions(asset_filter: AssetFilter) -> list:
    conditions = []
    if asset_filter.location:
        conditions.append(EquipmentAsset.location == asset_filter.location)
    if asset_filter.asset_type:
        conditions.append(EquipmentAsset.asset_type == asset_filter.asset_type)
    return conditions


def _window_conditions(column, window: DateWindow) -> list:
    conditions = []
    if window.gte is not None:
        conditions.append(column >= window.gte)
    if window.lte is not None:
        conditions.append(column <= window.lte)
    return conditions


def _lookup_conditions(location: str | None, is_active: bool | None) -> list:
    conditions = []
    if location:
        conditions.append(EquipmentAsset.location.icontains(location, autoescape=True))
    if is_active is not None:
        conditions.append(EquipmentAsset.is_active == is_active)
    return conditions


def to_asset(row: EquipmentAsset) -> Asset:
    return Asset(
        id=row.id,
        code=row.asset_code,
        name=row.name,
        location=row.location,
        is_active=bool(row.is_active),
        asset_type=row.asset_type,
        description=row.description,
    )


def to_span(row: WorkOrder) -> WorkOrderSpan:
    return WorkOrderSpan(
        asset_id=row.asset_id,
        reported_at=row.reported_at,
        completed_at=row.completed_at,
        status=row.status,
        fault_code=row.fault_code,
    )


def to_history_entry(row: MaintenanceHistory) -> MaintenanceHistoryEntry:
    return MaintenanceHistoryEntry(asset_id=row.asset_id, completed_at=row.completed_at)


class SqlAssetRepository:
    """Implements the engine's ``AssetRepository`` over an async session factory.

    Each call opens its own session, so one repository can serve concurrent
    engine calls.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def query_assets(self, asset_filter: AssetFilter, window: DateWindow) -> list[AssetRecords]:
        """Assets with completed work orders and maintenance history inside ``window``."""
        work_order_criteria = [
            WorkOrder.status == COMPLETED_STATUS,
            WorkOrder.completed_at.is_not(None),
            *_window_conditions(WorkOrder.reported_at, window),
        ]
        history_criteria = _window_conditions(MaintenanceHistory.completed_at, window)
        history_rel = EquipmentAsset.maintenance_history
        if history_criteria:
            history_rel = history_rel.and_(*history_criteria)

        stmt = (
            select(EquipmentAsset)
            .where(*_asset_conditions(asset_filter))
            .options(
                selectinload(EquipmentAsset.work_orders.and_(*work_order_criteria)),
                selectinload(history_rel),
            )
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
            except Exception:
                logger.exception("Failed to query assets for KPI metrics")
                await session.rollback()
                raise

        logger.debug("Fetched %d assets for KPI metrics", len(rows))
        return [
            AssetRecords(
                asset=to_asset(row),
                work_orders=[to_span(wo) for wo in row.work_orders],
                maintenance_history=[to_history_entry(mh) for mh in row.maintenance_history],
            )
            for row in rows
        ]

    async def query_maintenance_history(
        self, asset_id: str, window: DateWindow,
    ) -> list[MaintenanceHistoryEntry]:
        stmt = (
            select(MaintenanceHistory)
            .where(
                MaintenanceHistory.asset_id == asset_id,
                *_window_conditions(MaintenanceHistory.completed_at, window),
            )
            .order_by(MaintenanceHistory.completed_at.desc())
        )
        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
            except Exception:
                logger.exception("Failed to query maintenance history for asset: %s", asset_id)
                await session.rollback()
                raise
        return [to_history_entry(row) for row in rows]

    async def count_assets(self, asset_filter: AssetFilter, active_only: bool = False) -> int:
        conditions = _asset_conditions(asset_filter)
        if active_only:
            conditions.append(EquipmentAsset.is_active.is_(True))
        stmt = select(func.count()).select_from(EquipmentAsset).where(*conditions)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                return int(result.scalar_one())
            except Exception:
                logger.exception("Failed to count assets")
                await session.rollback()
                raise

    async def query_suggestion_candidates(
        self, text: str, location: str | None, is_active: bool | None, limit: int,
    ) -> list[Asset]:
        """Coarse prefilter: code or name contains ``text`` (case-insensitive)."""
        match = or_(
            EquipmentAsset.asset_code.icontains(text, autoescape=True),
            EquipmentAsset.name.icontains(text, autoescape=True),
        )
        return await self._lookup(match, location, is_active, limit, "suggestion candidates", text)

    async def query_code_matches(
        self, text: str, location: str | None, is_active: bool | None, limit: int,
    ) -> list[Asset]:
        match = EquipmentAsset.asset_code.icontains(text, autoescape=True)
        return await self._lookup(match, location, is_active, limit, "code matches", text)

    async def find_asset_by_exact_code(self, code: str) -> Asset | None:
        stmt = select(EquipmentAsset).where(EquipmentAsset.asset_code == code)
        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                row = result.scalar_one_or_none()
            except Exception:
                logger.exception("Failed to look up asset code: %s", code)
                await session.rollback()
                raise
        return to_asset(row) if row is not None else None

    async def _lookup(
        self,
        match,
        location: str | None,
        is_active: bool | None,
        limit: int,
        label: str,
        text: str,
    ) -> list[Asset]:
        stmt = (
            select(EquipmentAsset)
            .where(match, *_lookup_conditions(location, is_active))
            .order_by(EquipmentAsset.asset_code.asc(), EquipmentAsset.name.asc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
            except Exception:
                logger.exception("Failed to query %s for: %s", label, text)
                await session.rollback()
                raise
        logger.debug("Fetched %d %s for %r", len(rows), label, text)
        return [to_asset(row) for row in rows]
