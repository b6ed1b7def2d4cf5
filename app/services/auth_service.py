import logging
from typing import Dict

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from sqlalchemy.orm import Session

from config import GOOGLE_CLIENT_ID
from enums.user_role import UserRole
from schemas.auth_schema import TokenResponse
from services.account_service import AccountService
from services.admin_service import AdminService
from services.agent_service import AgentService
from services.vendor_service import VendorAccountService
from utils.exceptions import AuthError
from utils.security import create_access_token, decode_access_token

logger = logging.getLogger(__name__)

# Every role resolves to exactly one identity store
ROLE_ACCOUNTS: Dict[UserRole, AccountService] = {
    UserRole.ADMIN: AdminService(),
    UserRole.AGENT: AgentService(),
    UserRole.VENDOR: VendorAccountService(),
}


def accounts_for(role: UserRole) -> AccountService:
    return ROLE_ACCOUNTS[role]


def issue_token_response(account, role: UserRole) -> TokenResponse:
    token, expires_at = create_access_token(account.email, role, account.name)
    return TokenResponse(
        token=token,
        name=account.name,
        email=account.email,
        role=role.value,
        expires_at=expires_at,
    )


def login(db: Session, role: UserRole, email: str, password: str) -> TokenResponse:
    account = accounts_for(role).authenticate(db, email, password)
    if not account:
        logger.warning("Failed login attempt", extra={"role": role.value})
        raise AuthError("Invalid email or password")
    logger.info("Login succeeded", extra={"role": role.value})
    return issue_token_response(account, role)


def resolve_principal(db: Session, token: str):
    """Decode a bearer token and load the live account it names."""
    claims = decode_access_token(token)
    role = claims["role"]
    account = accounts_for(role).get_active_by_email(db, claims["sub"])
    if not account:
        raise AuthError("User not found")
    return account, role, claims


def verify_google_credential(credential: str) -> dict:
    if not GOOGLE_CLIENT_ID:
        raise AuthError("Google login is not configured")
    try:
        return id_token.verify_oauth2_token(credential, google_requests.Request(), GOOGLE_CLIENT_ID)
    except ValueError:
        raise AuthError("Invalid Google token")


def google_login(db: Session, role: UserRole, credential: str) -> TokenResponse:
    """Exchange a Google ID token for a session; accounts are never created here."""
    info = verify_google_credential(credential)
    if not info.get("email") or not info.get("email_verified"):
        raise AuthError("Google account email is not verified")

    account = accounts_for(role).get_active_by_email(db, info["email"])
    if not account:
        raise AuthError(f"No {role.value} account found for this Google user")
    logger.info("Google login succeeded", extra={"role": role.value})
    return issue_token_response(account, role)
