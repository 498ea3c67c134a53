"""Favorite location routes.

All routes act on the logged-in user's favorites only.

- GET /api/favorites - list, in display order
- POST /api/favorites - append a favorite
- DELETE /api/favorites/{favorite_id} - remove one
- PUT /api/favorites/order - reorder with the full list of ids
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from weather_lookup.auth.dependencies import get_current_user
from weather_lookup.database.connection import get_db_session
from weather_lookup.database.models import User, UserFavorite

logger = logging.getLogger(__name__)

router = APIRouter()


class FavoriteCreate(BaseModel):
    """Add favorite request."""

    location_name: str = Field(..., min_length=1, max_length=255)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    country_code: str = Field(..., min_length=2, max_length=8)


class FavoriteResponse(BaseModel):
    """Favorite response model."""

    id: str
    location_name: str
    latitude: float
    longitude: float
    country_code: str
    order: int


class FavoriteListResponse(BaseModel):
    """Favorite list response."""

    favorites: list[FavoriteResponse]
    total: int


class FavoriteOrderUpdate(BaseModel):
    """Reorder request: every favorite id of the user, in the new order."""

    ids: list[uuid.UUID]


def _to_response(favorite: UserFavorite) -> FavoriteResponse:
    return FavoriteResponse(
        id=str(favorite.id),
        location_name=favorite.location_name,
        latitude=favorite.latitude,
        longitude=favorite.longitude,
        country_code=favorite.country_code,
        order=favorite.order,
    )


def _already_in_favorites() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Location already in favorites",
    )


async def _list_favorites(db: AsyncSession, user: User) -> list[UserFavorite]:
    result = await db.execute(
        select(UserFavorite)
        .where(UserFavorite.user_id == user.id)
        .order_by(UserFavorite.order, UserFavorite.created_at)
    )
    return list(result.scalars().all())


@router.get("", response_model=FavoriteListResponse)
async def list_favorites(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FavoriteListResponse:
    """List the current user's favorites."""
    favorites = await _list_favorites(db, user)
    return FavoriteListResponse(
        favorites=[_to_response(f) for f in favorites],
        total=len(favorites),
    )


@router.post("", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    data: FavoriteCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FavoriteResponse:
    """Append a favorite to the end of the current user's list."""
    result = await db.execute(
        select(UserFavorite).where(
            UserFavorite.user_id == user.id,
            UserFavorite.latitude == data.latitude,
            UserFavorite.longitude == data.longitude,
        )
    )
    if result.scalar_one_or_none():
        raise _already_in_favorites()

    result = await db.execute(
        select(func.max(UserFavorite.order)).where(UserFavorite.user_id == user.id)
    )
    max_order = result.scalar_one_or_none()

    favorite = UserFavorite(
        user_id=user.id,
        location_name=data.location_name,
        latitude=data.latitude,
        longitude=data.longitude,
        country_code=data.country_code,
        order=0 if max_order is None else max_order + 1,
    )
    db.add(favorite)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request inserted the same coordinate first
        await db.rollback()
        raise _already_in_favorites()
    await db.refresh(favorite)

    logger.info(f"User {user.username} added favorite {favorite.location_name}")

    return _to_response(favorite)


@router.delete("/{favorite_id}")
async def remove_favorite(
    favorite_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    """Remove one of the current user's favorites."""
    result = await db.execute(
        select(UserFavorite).where(
            UserFavorite.id == favorite_id,
            UserFavorite.user_id == user.id,
        )
    )
    favorite = result.scalar_one_or_none()

    if not favorite:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Favorite not found",
        )

    await db.delete(favorite)
    await db.commit()

    return {"status": "deleted"}


@router.put("/order", response_model=FavoriteListResponse)
async def reorder_favorites(
    data: FavoriteOrderUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FavoriteListResponse:
    """Set the display order of the current user's favorites."""
    favorites = await _list_favorites(db, user)
    by_id = {f.id: f for f in favorites}

    if len(data.ids) != len(by_id) or set(data.ids) != set(by_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order must list every favorite exactly once",
        )

    for position, favorite_id in enumerate(data.ids):
        by_id[favorite_id].order = position

    await db.commit()

    ordered = [by_id[favorite_id] for favorite_id in data.ids]
    return FavoriteListResponse(
        favorites=[_to_response(f) for f in ordered],
        total=len(ordered),
    )
