"""Bearer-token authentication for users signed in through the hosted identity provider."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hoopspicks.config import settings
from hoopspicks.database import get_db
from hoopspicks.models import Membership, Profile
from hoopspicks.schemas.auth import CurrentUser
from hoopspicks.services.profile_service import ProfileService

TOKEN_TTL_MINUTES = 60
AUTH_SCHEME = HTTPBearer(auto_error=False)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _secret_key() -> str:
    return settings.auth_jwt_secret.get_secret_value()


def create_access_token(subject: str, extra: Dict[str, Any] | None = None) -> str:
    """Mint a token the way the identity provider does. Used by scripts and tests."""
    payload: Dict[str, Any] = {
        "sub": subject,
        "iat": int(now_utc().timestamp()),
        "exp": int((now_utc() + timedelta(minutes=TOKEN_TTL_MINUTES)).timestamp()),
    }
    if settings.auth_jwt_issuer:
        payload["iss"] = settings.auth_jwt_issuer
    if extra:
        payload.update(extra)
    return jwt.encode(payload, _secret_key(), algorithm=settings.auth_jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    options = {"require": ["sub", "exp"]}
    if settings.auth_jwt_issuer:
        return jwt.decode(
            token,
            _secret_key(),
            algorithms=[settings.auth_jwt_algorithm],
            issuer=settings.auth_jwt_issuer,
            options=options,
        )
    return jwt.decode(token, _secret_key(), algorithms=[settings.auth_jwt_algorithm], options=options)


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(AUTH_SCHEME),
) -> CurrentUser:
    if creds is None or not creds.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization token",
        )
    try:
        payload = decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        )

    user_id = str(payload.get("sub", "")).strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject"
        )
    return CurrentUser(
        id=user_id,
        email=payload.get("email"),
        is_admin=user_id in settings.admin_user_ids,
    )


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


async def require_pro(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Profile:
    result = await ProfileService(db).get_profile_by_user_id(user.id)
    if not result.is_success:
        if result.not_found:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Pro membership required")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.message)
    if result.data.membership != Membership.PRO:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Pro membership required")
    return result.data
