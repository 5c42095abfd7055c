"""
School Closings Database Model
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tickerfeed.database.models.base import Base


class SchoolClosing(Base):
    """A closing or delay reported for one organization."""

    __tablename__ = "school_closings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    region_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    region_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    zone_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    zone_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status_description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status_day: Mapped[str | None] = mapped_column(String(64), nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    county_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    state: Mapped[str | None] = mapped_column(String(64), nullable=True)
    fetched_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<SchoolClosing {self.organization_name}>"
