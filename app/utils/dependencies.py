from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from database.init import get_db
from enums.user_role import UserRole
from services.auth_service import resolve_principal
from services.otp_service import OtpStore
from utils.exceptions import AuthError

# auto_error is off so a missing header renders through AuthError like any other bad token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/admin/login", auto_error=False)


@dataclass
class Principal:
    account: Any
    role: UserRole
    email: str
    name: str
    expires_at: Optional[datetime] = None

    @property
    def id(self) -> int:
        return self.account.id


def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> Principal:
    if not token:
        raise AuthError("No token provided")

    account, role, claims = resolve_principal(db, token)
    expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc) if claims.get("exp") else None
    return Principal(
        account=account,
        role=role,
        email=account.email,
        name=account.name,
        expires_at=expires_at,
    )


def require_role(role: UserRole):
    """Dependency admitting only principals holding ``role``."""

    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role != role:
            raise AuthError(f"This action requires the {role.value} role")
        return principal

    return checker


admin_required = require_role(UserRole.ADMIN)
agent_required = require_role(UserRole.AGENT)
vendor_required = require_role(UserRole.VENDOR)


def get_otp_store(request: Request) -> OtpStore:
    return request.app.state.otp_store
