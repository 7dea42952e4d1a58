"""ID token helpers for identity-provider issued bearer credentials."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from config import settings


def _decode_options() -> Dict[str, Any]:
    return {
        "verify_aud": bool(settings.IDENTITY_TOKEN_AUDIENCE),
        "verify_iss": bool(settings.IDENTITY_TOKEN_ISSUER),
    }


def create_identity_token(
    subject: str,
    email: Optional[str] = None,
    expires_hours: Optional[int] = None,
) -> Dict[str, Any]:
    """Mint an ID token the way the identity provider does (tests and local dev)."""
    now = datetime.now(timezone.utc)
    ttl_hours = int(expires_hours or settings.IDENTITY_TOKEN_EXPIRATION_HOURS or 1)
    expires_at = now + timedelta(hours=max(ttl_hours, 1))
    claims: Dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    if email:
        claims["email"] = email
    if settings.IDENTITY_TOKEN_ISSUER:
        claims["iss"] = settings.IDENTITY_TOKEN_ISSUER
    if settings.IDENTITY_TOKEN_AUDIENCE:
        claims["aud"] = settings.IDENTITY_TOKEN_AUDIENCE

    token = jwt.encode(claims, settings.IDENTITY_TOKEN_SECRET, algorithm=settings.IDENTITY_TOKEN_ALGORITHM)
    return {
        "token": token,
        "expires_at": int(expires_at.timestamp()),
    }


def verify_identity_token(token: str) -> Dict[str, Any]:
    """Decode and validate an ID token, returning its claims."""
    try:
        payload = jwt.decode(
            token,
            settings.IDENTITY_TOKEN_SECRET,
            algorithms=[settings.IDENTITY_TOKEN_ALGORITHM],
            audience=settings.IDENTITY_TOKEN_AUDIENCE or None,
            issuer=settings.IDENTITY_TOKEN_ISSUER or None,
            options=_decode_options(),
        )
    except JWTError as exc:
        raise ValueError("Invalid or expired ID token.") from exc

    subject = str(payload.get("sub", "")).strip()
    if not subject:
        raise ValueError("ID token missing subject.")

    return payload
