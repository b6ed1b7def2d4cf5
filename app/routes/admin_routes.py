import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from enums.user_role import UserRole
from schemas.account_schema import AccountResponse, AdminCreate
from schemas.auth_schema import LoginRequest
from schemas.property_schema import PropertyStatusUpdate
from services.admin_service import AdminService
from services.auth_service import login
from services.property_service import PropertyManagementService
from services.report_service import ReportService
from utils.dependencies import Principal, admin_required
from utils.exceptions import AppError

from responses.success import data_response, success_response
from responses.error import internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

admin_service = AdminService()
property_service = PropertyManagementService()


@router.post("/login")
def admin_login(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        return data_response(login(db, UserRole.ADMIN, credentials.email, credentials.password))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Admin login failed")
        return internal_server_error(f"Login failed: {str(e)}")


@router.post("/register")
def register_admin(
    payload: AdminCreate,
    db: Session = Depends(get_db),
    current_admin: Principal = Depends(admin_required),
):
    try:
        admin = admin_service.create_account(db, payload.name, payload.email, payload.password)
        return success_response("Admin registered successfully", AccountResponse.model_validate(admin))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Admin registration failed")
        return internal_server_error(f"Failed to register admin: {str(e)}")


@router.get("/admins")
def get_admins(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    """All admins, soft deleted ones included"""
    try:
        admins = admin_service.get_all(db)
        return data_response([AccountResponse.model_validate(a) for a in admins])
    except Exception as e:
        logger.exception("Listing admins failed")
        return internal_server_error(f"Error retrieving admins: {str(e)}")


@router.get("/soft-admins")
def get_active_admins(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        admins = admin_service.get_all(db, include_deleted=False)
        return data_response([AccountResponse.model_validate(a) for a in admins])
    except Exception as e:
        logger.exception("Listing admins failed")
        return internal_server_error(f"Error retrieving admins: {str(e)}")


@router.get("/admin/{admin_id}")
def get_admin(admin_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        return data_response(AccountResponse.model_validate(admin_service.require(db, admin_id)))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Fetching admin failed")
        return internal_server_error(f"Error retrieving admin: {str(e)}")


@router.delete("/admin/{admin_id}")
def delete_admin(admin_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        admin_service.delete_admin(db, admin_id, current_admin.email)
        return success_response("Admin deleted successfully", {"id": admin_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Deleting admin failed")
        return internal_server_error(f"Error deleting admin: {str(e)}")


@router.delete("/soft-delete-admin/{admin_id}")
def soft_delete_admin(
    admin_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)
):
    try:
        admin_service.soft_delete_admin(db, admin_id, current_admin.email)
        return success_response("Admin soft deleted successfully", {"id": admin_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Soft deleting admin failed")
        return internal_server_error(f"Error deleting admin: {str(e)}")


@router.get("/all-assigned-properties")
def get_all_assigned_properties(
    db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)
):
    try:
        return data_response(property_service.list_all_assignments(db))
    except Exception as e:
        logger.exception("Listing assignments failed")
        return internal_server_error(f"Error retrieving assigned properties: {str(e)}")


@router.put("/update-property-status/{property_id}")
def update_property_status(
    property_id: int,
    payload: PropertyStatusUpdate,
    db: Session = Depends(get_db),
    current_admin: Principal = Depends(admin_required),
):
    try:
        prop = property_service.update_status(db, property_id, payload.status)
        return success_response(
            "Property status updated successfully",
            {"property_id": prop.id, "new_status": prop.status},
        )
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Updating property status failed")
        return internal_server_error(f"Error updating property status: {str(e)}")


@router.get("/dashboard-stats")
def get_dashboard_stats(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        return data_response(ReportService(db).get_dashboard_stats())
    except Exception as e:
        logger.exception("Building dashboard stats failed")
        return internal_server_error(f"Error retrieving dashboard stats: {str(e)}")
