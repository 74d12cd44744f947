from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base


class CompanyResearch(Base):
    """Analyst notes for one position; at most one per position."""

    __tablename__ = "company_research"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    position_id: Mapped[int] = mapped_column(
        ForeignKey("positions.id", ondelete="CASCADE"), unique=True, index=True
    )

    strategy: Mapped[str] = mapped_column(Text, default="")
    tam: Mapped[str] = mapped_column(Text, default="")
    competition: Mapped[str] = mapped_column(Text, default="")
    value_proposition: Mapped[str] = mapped_column(Text, default="")
    long_term_factors: Mapped[str] = mapped_column(Text, default="")
    outlook_3to5y: Mapped[str] = mapped_column(Text, default="")
    business_quality: Mapped[str] = mapped_column(Text, default="")
    tracking_data: Mapped[str] = mapped_column(Text, default="")
    valuation: Mapped[str] = mapped_column(Text, default="")
    revenue_downstream: Mapped[str] = mapped_column(Text, default="")
    revenue_product: Mapped[str] = mapped_column(Text, default="")
    revenue_customer: Mapped[str] = mapped_column(Text, default="")
    profit_split: Mapped[str] = mapped_column(Text, default="")
    leverage: Mapped[str] = mapped_column(Text, default="")
    peer_comparison: Mapped[str] = mapped_column(Text, default="")
    cost_structure: Mapped[str] = mapped_column(Text, default="")
    equipment: Mapped[str] = mapped_column(Text, default="")
    notes: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    position = relationship("Position", back_populates="research")
