"""Authentication dependencies for API user scoping."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from database import get_db
from models.admin import AdminAccount
from services.errors import ForbiddenError, InvalidCredentialError, UnauthorizedError
from services.identity_token import verify_identity_token


auth_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: str
    email: Optional[str] = None


def resolve_auth_context(credentials: Optional[HTTPAuthorizationCredentials]) -> AuthContext:
    """Verify a bearer credential and return the caller identity."""
    if not credentials or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise UnauthorizedError()

    try:
        payload = verify_identity_token(credentials.credentials)
    except ValueError as exc:
        raise InvalidCredentialError() from exc

    return AuthContext(
        user_id=str(payload.get("sub", "")),
        email=str(payload.get("email", "") or "") or None,
    )


async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme),
) -> AuthContext:
    """Resolve authenticated user from an identity-provider Bearer token."""
    return resolve_auth_context(credentials)


async def get_admin_context(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Require an active admin: a registered AdminAccount or an ADMIN_EMAILS entry."""
    email = (auth.email or "").strip().lower()
    if not email:
        raise ForbiddenError("Admin access requires an email claim.")
    if email in {str(item).strip().lower() for item in settings.ADMIN_EMAILS}:
        return auth

    result = await db.execute(select(AdminAccount).where(AdminAccount.email == email))
    admin = result.scalar_one_or_none()
    if not admin or not admin.is_active:
        raise ForbiddenError("Admin access required.")
    return auth
