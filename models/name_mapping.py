from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base


class NameMapping(Base):
    """Broker company name -> local-language display name."""

    __tablename__ = "name_mappings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    bbg_name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    chinese_name: Mapped[str] = mapped_column(String(255), default="")
    position_id: Mapped[int | None] = mapped_column(
        ForeignKey("positions.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    position = relationship("Position", back_populates="name_mappings")
