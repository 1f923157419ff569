from typing import NamedTuple

from fastapi import Depends, HTTPException, Query, Request, WebSocket, status
from fastapi.security import OAuth2PasswordBearer
from .jwt_handler import verify_access_token

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

ADMIN_ROLE = "admin"


class CurrentUser(NamedTuple):
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _user_from_token(token: str | None) -> CurrentUser | None:
    if not token:
        return None
    payload = verify_access_token(token)
    if payload is None or payload.get("sub") is None:
        return None
    try:
        return CurrentUser(id=int(payload["sub"]), role=payload.get("role", "customer"))
    except (TypeError, ValueError):
        return None


async def get_current_user(request: Request, token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """Dependency to validate JWT and return the caller's id and role."""
    user = _user_from_token(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = user.id
    return user


async def get_optional_user(token: str = Depends(oauth2_scheme)) -> CurrentUser | None:
    """Same as get_current_user but anonymous callers get None."""
    return _user_from_token(token)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency for back-office routes."""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return user


async def websocket_admin(websocket: WebSocket, token: str | None = Query(default=None)) -> CurrentUser | None:
    """Browsers cannot set headers on websockets, so the token comes as ?token=."""
    user = _user_from_token(token)
    if user is None or not user.is_admin:
        return None
    return user
