"""Authentication for the weather lookup API.

Users sign in through the account service (username/password or Google).
That service sets a signed session cookie; this package verifies it and
resolves the user for routes that need one (favorites).
"""

from weather_lookup.auth.dependencies import (
    get_current_user,
    get_current_user_optional,
    get_session_data,
)
from weather_lookup.auth.session import (
    SessionData,
    create_session_token,
    verify_session_token,
)

__all__ = [
    "create_session_token",
    "verify_session_token",
    "SessionData",
    "get_current_user",
    "get_current_user_optional",
    "get_session_data",
]
