from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base

TAXONOMY_TYPES = ("sector", "theme", "topdown")


class Taxonomy(Base):
    __tablename__ = "taxonomies"
    __table_args__ = (
        UniqueConstraint("type", "name", name="uq_taxonomies_type_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    type: Mapped[str] = mapped_column(String(16), index=True)
    name: Mapped[str] = mapped_column(String(120))
    parent_id: Mapped[int | None] = mapped_column(ForeignKey("taxonomies.id"), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    parent = relationship("Taxonomy", remote_side=[id], back_populates="children")
    children = relationship("Taxonomy", back_populates="parent", order_by="Taxonomy.sort_order")
