import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from database.init import atomic
from database.models import Agent, Property, PropertyService, Vendor
from enums.property_status import PropertyStatus
from enums.reconcile_mode import ReconcileMode
from schemas.property_schema import PropertyCreate, PropertyUpdate, today_utc
from services.assignment_service import reconcile
from services.base_service import BaseService
from services.email_service import EmailService
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DETAIL_FIELDS = ("owner_name", "owner_email", "address", "city", "state", "pincode", "project_ending_date")


def format_ending_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%d/%m/%Y") if value else None


def _person(account) -> Optional[dict]:
    if account is None:
        return None
    return {"id": account.id, "name": account.name, "email": account.email}


def _assignment_row(row: PropertyService, include_vendor: bool = True) -> dict:
    prop = row.property
    data = {
        "property_id": prop.id,
        "address": prop.address,
        "city": prop.city,
        "state": prop.state,
        "pincode": prop.pincode,
        "owner_name": prop.owner_name,
        "owner_email": prop.owner_email,
        "status": prop.status,
        "service_id": row.service_id,
        "service_type": row.service.service_type,
        "assigned_at": row.assigned_at,
        "agent": _person(row.assigned_by),
    }
    if include_vendor:
        data["vendor"] = _person(row.vendor)
    return data


class PropertyManagementService(BaseService):
    """Properties owned by agents and the vendor assignments hanging off them."""

    def __init__(self):
        super().__init__(Property)

    def _assignments_query(self, db: Session):
        return db.query(PropertyService).options(
            joinedload(PropertyService.property),
            joinedload(PropertyService.service),
            joinedload(PropertyService.vendor),
            joinedload(PropertyService.assigned_by),
        )

    async def create_property(
        self, db: Session, agent: Agent, payload: PropertyCreate, notifier: EmailService
    ) -> dict:
        with atomic(db):
            prop = Property(
                agent_id=agent.id,
                owner_name=payload.owner_name,
                owner_email=payload.owner_email,
                address=payload.address,
                city=payload.city,
                state=payload.state,
                pincode=payload.pincode,
                project_ending_date=payload.project_ending_date,
                status=PropertyStatus.NEW,
            )
            db.add(prop)
            db.flush()
            result = await reconcile(
                db,
                prop,
                agent,
                notifier,
                desired_service_ids=payload.service_ids,
                desired_vendor_ids=payload.vendor_ids,
                mode=ReconcileMode.CREATE,
            )

        logger.info("Property added", extra={"property_id": prop.id, "agent_id": agent.id})
        return {
            "message": "Property added successfully",
            "property_id": prop.id,
            "selected_services": payload.service_ids,
            "selected_vendors": payload.vendor_ids,
            "project_ending_date": format_ending_date(prop.project_ending_date),
            "assigned_services": {
                str(vendor_id): [
                    {"service_id": service_id, "service_type": service_type}
                    for service_id, service_type in services
                ]
                for vendor_id, services in result.assignments.items()
            },
        }

    async def edit_property(
        self,
        db: Session,
        agent: Agent,
        property_id: int,
        payload: PropertyUpdate,
        notifier: EmailService,
    ) -> dict:
        prop = (
            self.query(db)
            .filter(Property.id == property_id, Property.agent_id == agent.id)
            .first()
        )
        if not prop:
            raise NotFoundError("Property not found or you don't have access")

        # Resending the stored date is allowed even once it has passed
        ending_date = payload.project_ending_date
        if ending_date and ending_date != prop.project_ending_date and ending_date < today_utc():
            raise ValidationError("Project ending date cannot be in the past")

        with atomic(db):
            details_changed = False
            for name in DETAIL_FIELDS:
                value = getattr(payload, name)
                # Empty strings count as omitted
                if value is None or value == "":
                    continue
                if getattr(prop, name) != value:
                    setattr(prop, name, value)
                    details_changed = True
            db.flush()

            result = await reconcile(
                db,
                prop,
                agent,
                notifier,
                desired_service_ids=payload.service_ids,
                desired_vendor_ids=payload.vendor_ids,
                mode=ReconcileMode.EDIT,
            )

        logger.info("Property updated", extra={"property_id": prop.id, "agent_id": agent.id})
        return {
            "message": "Property updated successfully",
            "property_id": prop.id,
            "updated_details": details_changed,
            "updated_services": result.services_changed,
            "updated_vendors": result.vendors_changed,
            "new_services": result.service_ids if result.services_changed else None,
            "new_vendors": result.vendor_ids if result.vendors_changed else None,
            "removed_vendors": result.removed_vendor_ids if result.vendors_changed else None,
            "project_ending_date": format_ending_date(prop.project_ending_date),
            "current_services": result.service_ids,
            "current_vendors": result.vendor_ids,
        }

    def list_agent_properties(self, db: Session, agent: Agent) -> List[dict]:
        properties = (
            self.query(db)
            .options(
                joinedload(Property.property_services).joinedload(PropertyService.service),
                joinedload(Property.property_services).joinedload(PropertyService.vendor),
            )
            .filter(Property.agent_id == agent.id)
            .order_by(Property.id)
            .all()
        )

        result = []
        for prop in properties:
            rows = sorted(prop.property_services, key=lambda row: (row.vendor_id, row.service_id))
            services, vendors = {}, {}
            for row in rows:
                services.setdefault(
                    row.service_id,
                    {
                        "service_id": row.service_id,
                        "service_type": row.service.service_type,
                        "description": row.service.description,
                    },
                )
                vendors.setdefault(
                    row.vendor_id,
                    {"vendor_id": row.vendor_id, "name": row.vendor.name, "email": row.vendor.email},
                )
            result.append(
                {
                    "property_id": prop.id,
                    "owner_name": prop.owner_name,
                    "owner_email": prop.owner_email,
                    "address": prop.address,
                    "city": prop.city,
                    "state": prop.state,
                    "pincode": prop.pincode,
                    "status": prop.status,
                    "created_at": prop.created_at,
                    "project_ending_date": prop.project_ending_date,
                    "services": sorted(services.values(), key=lambda s: s["service_id"]),
                    "vendors": list(vendors.values()),
                    "assigned_at": min((row.assigned_at for row in rows), default=None),
                }
            )
        return result

    def update_status(self, db: Session, property_id: int, status: PropertyStatus) -> Property:
        prop = self.get(db, property_id)
        if not prop:
            raise NotFoundError("Property not found")
        prop = self.update(db, prop, {"status": status})
        logger.info("Property status set to %s", status.value, extra={"property_id": property_id})
        return prop

    def list_vendor_assignments(self, db: Session, vendor: Vendor) -> List[dict]:
        rows = (
            self._assignments_query(db)
            .filter(PropertyService.vendor_id == vendor.id)
            .order_by(PropertyService.property_id, PropertyService.service_id)
            .all()
        )
        return [_assignment_row(row, include_vendor=False) for row in rows]

    def list_all_assignments(self, db: Session) -> List[dict]:
        rows = (
            self._assignments_query(db)
            .order_by(PropertyService.property_id, PropertyService.vendor_id, PropertyService.service_id)
            .all()
        )
        return [_assignment_row(row) for row in rows]
