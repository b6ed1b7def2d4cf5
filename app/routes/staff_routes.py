import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from schemas.account_schema import AccountResponse, AgentCreate, AgentUpdate, VendorCreate, VendorUpdate
from services.agent_service import AgentService
from services.email_service import EmailService, get_email_service
from services.vendor_service import VendorAccountService
from utils.dependencies import Principal, admin_required
from utils.exceptions import AppError

from responses.success import data_response, success_response
from responses.error import internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Staff"])

agent_service = AgentService()
vendor_service = VendorAccountService()


# ---------------------------------------------------------------- vendors


@router.post("/add-vendor")
async def add_vendor(
    payload: VendorCreate,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_admin: Principal = Depends(admin_required),
):
    try:
        vendor = await vendor_service.add_vendor(db, payload, email_service)
        return success_response("Vendor added successfully", vendor_service.to_response(vendor))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Adding vendor failed")
        return internal_server_error(f"Failed to add vendor: {str(e)}")


@router.get("/vendors")
def get_vendors(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        vendors = vendor_service.list_vendors(db)
        return data_response([vendor_service.to_response(v) for v in vendors])
    except Exception as e:
        logger.exception("Listing vendors failed")
        return internal_server_error(f"Error retrieving vendors: {str(e)}")


@router.get("/soft-vendors")
def get_active_vendors(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        vendors = vendor_service.list_vendors(db, include_deleted=False)
        return data_response([vendor_service.to_response(v) for v in vendors])
    except Exception as e:
        logger.exception("Listing vendors failed")
        return internal_server_error(f"Error retrieving vendors: {str(e)}")


@router.get("/vendor/{vendor_id}")
def get_vendor(vendor_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        return data_response(vendor_service.to_response(vendor_service.require(db, vendor_id)))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Fetching vendor failed")
        return internal_server_error(f"Error retrieving vendor: {str(e)}")


@router.put("/edit-vendor/{vendor_id}")
def edit_vendor(
    vendor_id: int,
    payload: VendorUpdate,
    db: Session = Depends(get_db),
    current_admin: Principal = Depends(admin_required),
):
    try:
        vendor = vendor_service.edit_vendor(db, vendor_id, payload)
        return success_response("Vendor updated successfully", vendor_service.to_response(vendor))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Editing vendor failed")
        return internal_server_error(f"Failed to update vendor: {str(e)}")


@router.delete("/delete-vendor/{vendor_id}")
def delete_vendor(vendor_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        vendor_service.delete_vendor(db, vendor_id)
        return success_response("Vendor deleted successfully", {"id": vendor_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Deleting vendor failed")
        return internal_server_error(f"Error deleting vendor: {str(e)}")


@router.delete("/soft-delete-vendor/{vendor_id}")
def soft_delete_vendor(
    vendor_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)
):
    try:
        vendor_service.soft_delete_vendor(db, vendor_id)
        return success_response("Vendor soft deleted successfully", {"id": vendor_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Soft deleting vendor failed")
        return internal_server_error(f"Error deleting vendor: {str(e)}")


# ---------------------------------------------------------------- agents


@router.post("/add-agent")
async def add_agent(
    payload: AgentCreate,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    current_admin: Principal = Depends(admin_required),
):
    try:
        agent = await agent_service.add_agent(db, payload, email_service)
        return success_response("Agent added successfully", AccountResponse.model_validate(agent))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Adding agent failed")
        return internal_server_error(f"Failed to add agent: {str(e)}")


@router.get("/agents")
def get_agents(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        return data_response([AccountResponse.model_validate(a) for a in agent_service.get_all(db)])
    except Exception as e:
        logger.exception("Listing agents failed")
        return internal_server_error(f"Error retrieving agents: {str(e)}")


@router.get("/soft-agents")
def get_active_agents(db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        agents = agent_service.get_all(db, include_deleted=False)
        return data_response([AccountResponse.model_validate(a) for a in agents])
    except Exception as e:
        logger.exception("Listing agents failed")
        return internal_server_error(f"Error retrieving agents: {str(e)}")


@router.get("/agent/{agent_id}")
def get_agent(agent_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        return data_response(AccountResponse.model_validate(agent_service.require(db, agent_id)))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Fetching agent failed")
        return internal_server_error(f"Error retrieving agent: {str(e)}")


@router.put("/edit-agent/{agent_id}")
def edit_agent(
    agent_id: int,
    payload: AgentUpdate,
    db: Session = Depends(get_db),
    current_admin: Principal = Depends(admin_required),
):
    try:
        agent = agent_service.edit_agent(db, agent_id, payload)
        return success_response("Agent updated successfully", AccountResponse.model_validate(agent))
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Editing agent failed")
        return internal_server_error(f"Failed to update agent: {str(e)}")


@router.delete("/delete-agent/{agent_id}")
def delete_agent(agent_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)):
    try:
        agent_service.delete_agent(db, agent_id)
        return success_response("Agent deleted successfully", {"id": agent_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Deleting agent failed")
        return internal_server_error(f"Error deleting agent: {str(e)}")


@router.delete("/soft-delete-agent/{agent_id}")
def soft_delete_agent(
    agent_id: int, db: Session = Depends(get_db), current_admin: Principal = Depends(admin_required)
):
    try:
        agent_service.soft_delete_agent(db, agent_id)
        return success_response("Agent soft deleted successfully", {"id": agent_id})
    except AppError as e:
        return e.response()
    except Exception as e:
        logger.exception("Soft deleting agent failed")
        return internal_server_error(f"Error deleting agent: {str(e)}")
