import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from enums.user_role import UserRole
from schemas.auth_schema import GoogleLoginRequest
from services.auth_service import google_login
from utils.dependencies import Principal, get_current_principal
from utils.exceptions import AppError

from responses.success import data_response
from responses.error import internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/validate-token")
def validate_token(principal: Principal = Depends(get_current_principal)):
    """Echo the identity behind a still-valid token"""
    return data_response(
        {
            "name": principal.name,
            "email": principal.email,
            "role": principal.role,
            "expires_at": principal.expires_at,
        }
    )


@router.post("/{role}/google-login")
def google_login_route(role: UserRole, payload: GoogleLoginRequest, db: Session = Depends(get_db)):
    try:
        return data_response(google_login(db, role, payload.credential))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Google login failed")
        return internal_server_error(f"Google login failed: {str(e)}")
