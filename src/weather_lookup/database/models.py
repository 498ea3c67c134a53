"""Database models for the weather lookup service.

## Schema Overview

```
users
└── user_favorites (1:N)

weather_onecall          - cached One Call current weather responses
weather_day_summaries    - cached One Call day summaries
location_searches        - cached geocoding results per (city, lang)
```

Cached responses are stored verbatim as JSON. The day summary cache has a
unique key on (latitude, longitude, date) so repeated refreshes overwrite
rather than duplicate.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""

    # JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
    type_annotation_map = {
        dict[str, Any]: JSON().with_variant(JSONB(), "postgresql"),
    }


class User(Base):
    """User account model.

    Accounts are created by username/password registration or Google
    sign-in, both handled by the account service. Here the row only owns
    favorites.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    google_id: Mapped[str | None] = mapped_column(String(255), unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    favorites: Mapped[list["UserFavorite"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserFavorite.order",
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class UserFavorite(Base):
    """A location saved by a user.

    `order` is the user's display order; new favorites are appended at the end.
    """

    __tablename__ = "user_favorites"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    location_name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    country_code: Mapped[str] = mapped_column(String(8), nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "latitude", "longitude", name="uq_user_favorite_coords"),
        Index("ix_user_favorites_user_order", "user_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<UserFavorite {self.location_name} ({self.latitude}, {self.longitude})>"


class WeatherOneCall(Base):
    """Cached One Call current weather response."""

    __tablename__ = "weather_onecall"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    units: Mapped[str] = mapped_column(String(16), nullable=False)
    lang: Mapped[str] = mapped_column(String(8), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(nullable=False)

    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("latitude", "longitude", "units", "lang", name="uq_onecall_key"),
    )

    def __repr__(self) -> str:
        return f"<WeatherOneCall ({self.latitude}, {self.longitude}) {self.units}/{self.lang}>"


class WeatherDaySummary(Base):
    """Cached One Call day summary for one coordinate and date."""

    __tablename__ = "weather_day_summaries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)  # YYYY-MM-DD
    data: Mapped[dict[str, Any]] = mapped_column(nullable=False)

    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("latitude", "longitude", "date", name="uq_day_summary_key"),
    )

    def __repr__(self) -> str:
        return f"<WeatherDaySummary ({self.latitude}, {self.longitude}) {self.date}>"


class LocationSearch(Base):
    """Cached geocoding result for a city name and language."""

    __tablename__ = "location_searches"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    lang: Mapped[str] = mapped_column(String(8), nullable=False)
    # Geocoding answers with a list of candidate places
    data: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )

    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("city", "lang", name="uq_location_search_key"),
    )

    def __repr__(self) -> str:
        return f"<LocationSearch {self.city}/{self.lang}>"
