from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base

LONG = "long"
SHORT = "short"
FLAT = "/"
DIRECTIONS = (LONG, SHORT, FLAT)


class Position(Base):
    __tablename__ = "positions"
    __table_args__ = (
        CheckConstraint("position_amount >= 0", name="ck_positions_amount_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    ticker_bbg: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name_en: Mapped[str] = mapped_column(String(255), default="")
    name_cn: Mapped[str] = mapped_column(String(255), default="")
    market: Mapped[str] = mapped_column(String(120), default="")

    sector_id: Mapped[int | None] = mapped_column(ForeignKey("taxonomies.id"), nullable=True)
    theme_id: Mapped[int | None] = mapped_column(ForeignKey("taxonomies.id"), nullable=True)
    topdown_id: Mapped[int | None] = mapped_column(ForeignKey("taxonomies.id"), nullable=True)

    priority: Mapped[str] = mapped_column(String(32), default="")
    long_short: Mapped[str] = mapped_column(String(8), default=FLAT, index=True)

    # valuation fields, display only
    market_cap_local: Mapped[float] = mapped_column(Float, default=0.0)
    market_cap_rmb: Mapped[float] = mapped_column(Float, default=0.0)
    profit_2025: Mapped[float] = mapped_column(Float, default=0.0)
    pe_2026: Mapped[float] = mapped_column(Float, default=0.0)
    pe_2027: Mapped[float] = mapped_column(Float, default=0.0)
    price_tag: Mapped[str] = mapped_column(String(64), default="")
    market_cap_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # always >= 0; the sign lives in long_short
    position_amount: Mapped[float] = mapped_column(Float, default=0.0)
    position_weight: Mapped[float] = mapped_column(Float, default=0.0)

    gic_industry: Mapped[str] = mapped_column(String(255), default="")
    exchange_country: Mapped[str] = mapped_column(String(120), default="")
    pnl: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    sector = relationship("Taxonomy", foreign_keys=[sector_id])
    theme = relationship("Taxonomy", foreign_keys=[theme_id])
    topdown = relationship("Taxonomy", foreign_keys=[topdown_id])
    name_mappings = relationship("NameMapping", back_populates="position")
    research = relationship(
        "CompanyResearch",
        back_populates="position",
        uselist=False,
        cascade="all, delete-orphan",
    )
