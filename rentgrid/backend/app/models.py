# app/models.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    DateTime,
    Enum,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class JobRunStatus(str, enum.Enum):
    running = "running"
    success = "success"
    failed = "failed"


# -----------------------------
# Models
# -----------------------------
class Rental(Base):
    """
    Scraped rental listing. latitude/longitude are optional: listings without
    them are placed by the address heuristic at aggregation time.
    """

    __tablename__ = "rentals"
    __table_args__ = (
        UniqueConstraint("address", "source", name="uq_rental_address_source"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    address: Mapped[str] = mapped_column(String(255))
    price: Mapped[float | None] = mapped_column(Float, nullable=True, index=True)
    price_display: Mapped[str] = mapped_column(String(40), default="")

    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    bedrooms_display: Mapped[str] = mapped_column(String(40), default="")
    bathrooms: Mapped[str | None] = mapped_column(String(20), nullable=True)
    sqft: Mapped[str | None] = mapped_column(String(20), nullable=True)

    url: Mapped[str] = mapped_column(String(500), default="")
    listing_source: Mapped[str | None] = mapped_column(String(80), nullable=True)
    source: Mapped[str] = mapped_column(String(80), default="manual")
    scraped_date: Mapped[str | None] = mapped_column(String(40), nullable=True)

    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class JobRun(Base):
    """
    Tracks job executions (heat-map cache refresh).
    app/service_layer/jobruns.py writes these.
    """

    __tablename__ = "job_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    job_name: Mapped[str] = mapped_column(String(80), index=True)

    status: Mapped[JobRunStatus] = mapped_column(Enum(JobRunStatus), default=JobRunStatus.running, index=True)

    started_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    summary_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
