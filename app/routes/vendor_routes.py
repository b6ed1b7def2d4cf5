import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from enums.user_role import UserRole
from schemas.auth_schema import LoginRequest, OtpRequest, OtpVerifyRequest
from services.auth_service import issue_token_response, login
from services.email_service import EmailService, get_email_service
from services.otp_service import OtpService, OtpStore
from services.property_service import PropertyManagementService
from utils.dependencies import Principal, get_otp_store, vendor_required
from utils.exceptions import AppError

from responses.success import data_response, success_response
from responses.error import internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendor", tags=["Vendor"])

property_service = PropertyManagementService()


@router.post("/login")
def vendor_login(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        return data_response(login(db, UserRole.VENDOR, credentials.email, credentials.password))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Vendor login failed")
        return internal_server_error(f"Login failed: {str(e)}")


@router.post("/login-with-otp")
async def login_with_otp(
    payload: OtpRequest,
    db: Session = Depends(get_db),
    store: OtpStore = Depends(get_otp_store),
    email_service: EmailService = Depends(get_email_service),
):
    try:
        await OtpService(store).request_otp(db, payload.email, email_service)
        return success_response("OTP sent to your email")
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Issuing OTP failed")
        return internal_server_error(f"Failed to send OTP: {str(e)}")


@router.post("/verify-otp")
def verify_otp(
    payload: OtpVerifyRequest,
    db: Session = Depends(get_db),
    store: OtpStore = Depends(get_otp_store),
):
    try:
        vendor = OtpService(store).verify_otp(db, payload.email, payload.otp)
        return data_response(issue_token_response(vendor, UserRole.VENDOR))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("OTP verification failed")
        return internal_server_error(f"Failed to verify OTP: {str(e)}")


@router.get("/assigned-properties")
def get_assigned_properties(db: Session = Depends(get_db), current_vendor: Principal = Depends(vendor_required)):
    try:
        return data_response(property_service.list_vendor_assignments(db, current_vendor.account))
    except Exception as e:
        logger.exception("Listing assigned properties failed")
        return internal_server_error(f"Error retrieving assigned properties: {str(e)}")
