import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from schemas.service_schema import ServiceCreate, ServiceResponse
from services.catalog_service import CatalogService
from utils.dependencies import Principal, admin_required
from utils.exceptions import AppError

from responses.success import data_response, success_response
from responses.error import internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Services"])

catalog_service = CatalogService()


@router.post("/add-service")
def add_service(
    payload: ServiceCreate,
    db: Session = Depends(get_db),
    current_admin: Principal = Depends(admin_required),
):
    try:
        service = catalog_service.create_service(db, payload)
        return success_response("Service added successfully", ServiceResponse.model_validate(service))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Adding service failed")
        return internal_server_error(f"Failed to add service: {str(e)}")


@router.get("/services")
def get_services(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        return data_response([ServiceResponse.model_validate(s) for s in catalog_service.get_all(db)])
    except Exception as e:
        logger.exception("Listing services failed")
        return internal_server_error(f"Error retrieving services: {str(e)}")


@router.get("/soft-services")
def get_active_services(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        services = catalog_service.get_all(db, include_deleted=False)
        return data_response([ServiceResponse.model_validate(s) for s in services])
    except Exception as e:
        logger.exception("Listing services failed")
        return internal_server_error(f"Error retrieving services: {str(e)}")


@router.delete("/delete-service/{service_id}")
def delete_service(
    service_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)
):
    try:
        catalog_service.delete_service(db, service_id)
        return success_response("Service deleted successfully", {"id": service_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Deleting service failed")
        return internal_server_error(f"Error deleting service: {str(e)}")


@router.delete("/soft-delete-service/{service_id}")
def soft_delete_service(
    service_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)
):
    try:
        catalog_service.soft_delete_service(db, service_id)
        return success_response("Service soft deleted successfully", {"id": service_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Soft deleting service failed")
        return internal_server_error(f"Error deleting service: {str(e)}")
