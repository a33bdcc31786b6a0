from typing import Optional

from fastapi import Query

from ironlog.core.config import settings


def current_user(user_id: Optional[str] = Query(None)) -> str:
    # No auth layer: callers name the user, single-user installs omit it
    return user_id or settings.default_user_id


def ok(data, **extra) -> dict:
    """Success envelope shared by every endpoint."""
    return {"success": True, "data": data, **extra}
