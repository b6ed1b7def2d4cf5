import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from enums.user_role import UserRole
from schemas.auth_schema import LoginRequest
from schemas.property_schema import PropertyCreate, PropertyUpdate
from schemas.service_schema import ServiceResponse, ServiceSelection
from services.auth_service import login
from services.catalog_service import CatalogService
from services.email_service import EmailService, get_email_service
from services.property_service import PropertyManagementService
from services.vendor_service import VendorAccountService
from utils.dependencies import Principal, agent_required
from utils.exceptions import AppError

from responses.success import data_response
from responses.error import internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agent", tags=["Agent"])

catalog_service = CatalogService()
vendor_service = VendorAccountService(catalog_service)
property_service = PropertyManagementService()


@router.post("/login")
def agent_login(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        return data_response(login(db, UserRole.AGENT, credentials.email, credentials.password))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Agent login failed")
        return internal_server_error(f"Login failed: {str(e)}")


@router.get("/services")
def get_services(db: Session = Depends(get_db), current_agent: Principal = Depends(agent_required)):
    """Active catalog entries an agent can pick from"""
    try:
        services = catalog_service.get_all(db, include_deleted=False)
        return data_response([ServiceResponse.model_validate(s) for s in services])
    except Exception as e:
        logger.exception("Listing services failed")
        return internal_server_error(f"Error retrieving services: {str(e)}")


@router.post("/vendors-by-services")
def get_vendors_by_services(
    payload: ServiceSelection,
    db: Session = Depends(get_db),
    current_agent: Principal = Depends(agent_required),
):
    try:
        return data_response(vendor_service.vendors_by_services(db, payload.service_ids))
    except Exception as e:
        logger.exception("Vendor lookup failed")
        return internal_server_error(f"Error retrieving vendors: {str(e)}")


@router.get("/available-services")
def get_available_services(db: Session = Depends(get_db), current_agent: Principal = Depends(agent_required)):
    try:
        return data_response(vendor_service.available_services(db))
    except Exception as e:
        logger.exception("Listing available services failed")
        return internal_server_error(f"Error retrieving available services: {str(e)}")


@router.post("/add-property")
async def add_property(
    payload: PropertyCreate,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_agent: Principal = Depends(agent_required),
):
    try:
        result = await property_service.create_property(db, current_agent.account, payload, email_service)
        return data_response(result)
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Adding property failed")
        return internal_server_error(f"Failed to add property: {str(e)}")


@router.get("/properties")
def get_properties(db: Session = Depends(get_db), current_agent: Principal = Depends(agent_required)):
    try:
        return data_response(property_service.list_agent_properties(db, current_agent.account))
    except Exception as e:
        logger.exception("Listing properties failed")
        return internal_server_error(f"Error retrieving properties: {str(e)}")


@router.put("/edit-property/{property_id}")
async def edit_property(
    property_id: int,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_agent: Principal = Depends(agent_required),
):
    try:
        result = await property_service.edit_property(
            db, current_agent.account, property_id, payload, email_service
        )
        return data_response(result)
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Editing property failed")
        return internal_server_error(f"Failed to update property: {str(e)}")
