"""
Weather Database Models

Locations plus the current-conditions and daily-forecast readings that the
weather ingest jobs write for them.
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tickerfeed.database.models.base import Base, TimestampMixin
from tickerfeed.database.models.content import new_id


class WeatherLocation(Base, TimestampMixin):
    """A place weather is tracked for."""

    __tablename__ = "weather_locations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    custom_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    admin1: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lon: Mapped[float | None] = mapped_column(Float, nullable=True)

    @property
    def display_name(self) -> str:
        return self.custom_name or self.name or "Unknown"

    def __repr__(self) -> str:
        return f"<WeatherLocation {self.name}>"


class WeatherCurrent(Base):
    """Current-conditions reading for a location."""

    __tablename__ = "weather_current"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("weather_locations.id"),
        nullable=False,
        index=True,
    )
    temperature_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    temperature_unit: Mapped[str | None] = mapped_column(String(8), nullable=True)  # "°C" / "°F"
    summary: Mapped[str | None] = mapped_column(String(255), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    weather_code: Mapped[int | None] = mapped_column(Integer, nullable=True)  # WMO code
    fetched_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


class WeatherDailyForecast(Base):
    """One forecast day for a location."""

    __tablename__ = "weather_daily_forecast"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("weather_locations.id"),
        nullable=False,
        index=True,
    )
    forecast_date: Mapped[date] = mapped_column(Date, nullable=False)
    temp_max_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    temp_max_unit: Mapped[str | None] = mapped_column(String(8), nullable=True)
    temp_max_f: Mapped[float | None] = mapped_column(Float, nullable=True)
    temp_min_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    temp_min_unit: Mapped[str | None] = mapped_column(String(8), nullable=True)
    temp_min_f: Mapped[float | None] = mapped_column(Float, nullable=True)
    summary: Mapped[str | None] = mapped_column(String(255), nullable=True)
