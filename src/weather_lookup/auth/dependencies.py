"""FastAPI dependencies for authentication.

## Usage

```python
from fastapi import Depends
from weather_lookup.auth import get_current_user
from weather_lookup.database import User

@router.get("/favorites")
async def list_favorites(user: User = Depends(get_current_user)):
    ...
```
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from weather_lookup.auth.session import SessionData, verify_session_token
from weather_lookup.database.connection import get_db_session
from weather_lookup.database.models import User

logger = logging.getLogger(__name__)


async def get_session_data(request: Request) -> SessionData | None:
    """Extract and verify session data from the session cookie.

    Returns None if no session or invalid session.
    """
    settings = request.app.state.settings
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None

    return verify_session_token(token, settings.secret_key)


async def get_current_user_optional(
    session: SessionData | None = Depends(get_session_data),
    db: AsyncSession = Depends(get_db_session),
) -> User | None:
    """Get the current user if logged in, or None."""
    if session is None:
        return None

    result = await db.execute(select(User).where(User.id == session.user_id))
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning(f"Session for non-existent user: {session.user_id}")
        return None

    return user


async def get_current_user(
    user: User | None = Depends(get_current_user_optional),
) -> User:
    """Get the current authenticated user.

    Raises 401 if not authenticated.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged",
        )

    return user
