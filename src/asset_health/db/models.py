"""ORM models for assets, work orders and maintenance history."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


def _uuid() -> str:
    return str(uuid.uuid4())


class EquipmentAsset(Base):
    """A maintainable piece of equipment."""

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=_uuid)
    asset_code = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    asset_type = Column(String(64), nullable=True)
    location = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    work_orders = relationship("WorkOrder", back_populates="asset")
    maintenance_history = relationship(
        "MaintenanceHistory",
        back_populates="asset",
        order_by="MaintenanceHistory.completed_at.desc()",
    )


class WorkOrder(Base):
    """A repair request raised against an asset."""

    __tablename__ = "work_orders"

    id = Column(String(36), primary_key=True, default=_uuid)
    asset_id = Column(String(36), ForeignKey("assets.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False, default="")
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING/IN_PROGRESS/WAITING_PARTS/COMPLETED/CANCELLED
    fault_code = Column(String(64), nullable=True)
    reported_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    asset = relationship("EquipmentAsset", back_populates="work_orders")


class MaintenanceHistory(Base):
    """A completed maintenance action on an asset."""

    __tablename__ = "maintenance_history"

    id = Column(String(36), primary_key=True, default=_uuid)
    asset_id = Column(String(36), ForeignKey("assets.id"), nullable=False, index=True)
    work_order_id = Column(String(36), ForeignKey("work_orders.id"), nullable=True)
    resolution = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=False, index=True)

    asset = relationship("EquipmentAsset", back_populates="maintenance_history")
