"""Storage key namespacing for caller-owned persistence.

The core never reads or writes storage; callers use these keys so every
user's planning state and history live under their own namespace.
"""

from __future__ import annotations

from typing import Any

from habitcore.analytics.adapters import parse_text

WEIGHT_MANAGER_STATE_PREFIX = "weight_manager_state"
WEIGHT_JOURNEY_HISTORY_PREFIX = "weight_manager_journey_history"
WEIGHT_PROGRESS_PREFIX = "weight_progress_check"
DEFAULT_USER_ID = "default"


def resolve_user_id(
    auth_user_id: Any = None,
    profile_id: Any = None,
    profile_user_id: Any = None,
) -> str:
    """Auth id, else profile id, else the profile's user id, else "default"."""
    for candidate in (auth_user_id, profile_id, profile_user_id):
        user_id = parse_text(candidate)
        if user_id:
            return user_id
    return DEFAULT_USER_ID


def weight_manager_state_key(auth_user_id: Any = None, profile_id: Any = None, profile_user_id: Any = None) -> str:
    return f"{WEIGHT_MANAGER_STATE_PREFIX}:{resolve_user_id(auth_user_id, profile_id, profile_user_id)}"


def weight_journey_history_key(auth_user_id: Any = None, profile_id: Any = None, profile_user_id: Any = None) -> str:
    return f"{WEIGHT_JOURNEY_HISTORY_PREFIX}:{resolve_user_id(auth_user_id, profile_id, profile_user_id)}"


def weight_progress_key(auth_user_id: Any = None, profile_id: Any = None, profile_user_id: Any = None) -> str:
    return f"{WEIGHT_PROGRESS_PREFIX}:{resolve_user_id(auth_user_id, profile_id, profile_user_id)}"
