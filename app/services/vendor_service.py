import logging
from typing import Iterable, List, Tuple

from sqlalchemy.orm import Session, joinedload

from database.init import atomic
from database.models import PropertyService, Vendor, VendorService
from enums.record_status import RecordStatus
from schemas.account_schema import VendorCreate, VendorResponse, VendorUpdate
from schemas.service_schema import ServiceSummary
from services.account_service import AccountService
from services.catalog_service import CatalogService
from services.email_service import EmailService
from utils.exceptions import ConflictError, InvalidServiceIds

logger = logging.getLogger(__name__)


class VendorAccountService(AccountService):
    """Vendor accounts together with the services each vendor offers."""

    label = "Vendor"

    def __init__(self, catalog: CatalogService = None):
        super().__init__(Vendor)
        self.catalog = catalog or CatalogService()

    def to_response(self, vendor: Vendor) -> VendorResponse:
        response = VendorResponse.model_validate(vendor)
        response.services = [
            ServiceSummary(
                service_id=vs.service_id,
                service_type=vs.service.service_type,
                description=vs.service.description,
            )
            for vs in sorted(vendor.vendor_services, key=lambda vs: vs.service_id)
        ]
        return response

    def list_vendors(self, db: Session, include_deleted: bool = True) -> List[Vendor]:
        query = self.query(db) if include_deleted else self.active_query(db)
        return (
            query.options(joinedload(Vendor.vendor_services).joinedload(VendorService.service))
            .order_by(Vendor.id)
            .all()
        )

    def _check_service_ids(self, db: Session, service_ids: Iterable[int]) -> List[int]:
        ids = list(dict.fromkeys(service_ids))
        invalid = self.catalog.find_invalid_service_ids(db, ids)
        if invalid:
            raise InvalidServiceIds(invalid)
        return ids

    async def add_vendor(self, db: Session, payload: VendorCreate, email_service: EmailService) -> Vendor:
        self.ensure_email_available(db, payload.email)
        service_ids = self._check_service_ids(db, payload.service_ids)

        with atomic(db):
            vendor = self.create(db, self.build(payload.name, payload.email, payload.password), commit=False)
            for service_id in service_ids:
                db.add(VendorService(vendor_id=vendor.id, service_id=service_id))
            db.flush()
            # must run before commit
            await email_service.send_invitation_email(vendor.email, "Vendor")

        db.refresh(vendor)
        logger.info("Vendor added", extra={"vendor_id": vendor.id})
        return vendor

    def edit_vendor(self, db: Session, vendor_id: int, payload: VendorUpdate) -> Vendor:
        vendor = self.require(db, vendor_id)
        if payload.email and payload.email != vendor.email:
            self.ensure_email_available(db, payload.email, exclude_id=vendor.id)

        with atomic(db):
            if payload.name:
                vendor.name = payload.name
            if payload.email:
                vendor.email = payload.email

            if payload.service_ids is not None:
                service_ids = self._check_service_ids(db, payload.service_ids)
                self._guard_assigned_services(db, vendor, service_ids)
                current = {vs.service_id: vs for vs in vendor.vendor_services}
                for service_id, vendor_service in current.items():
                    if service_id not in service_ids:
                        vendor.vendor_services.remove(vendor_service)
                for service_id in service_ids:
                    if service_id not in current:
                        vendor.vendor_services.append(VendorService(service_id=service_id))

        db.refresh(vendor)
        logger.info("Vendor updated", extra={"vendor_id": vendor.id})
        return vendor

    def _guard_assigned_services(self, db: Session, vendor: Vendor, service_ids: List[int]):
        """A vendor cannot stop offering a service it is still assigned to."""
        assigned = {
            row.service_id
            for row in db.query(PropertyService.service_id)
            .filter(PropertyService.vendor_id == vendor.id)
            .distinct()
        }
        still_needed = sorted(assigned - set(service_ids))
        if still_needed:
            raise ConflictError(
                "Vendor is still assigned to properties for services being removed.",
                {"assigned_service_ids": still_needed},
            )

    def delete_vendor(self, db: Session, vendor_id: int) -> None:
        vendor = self.require(db, vendor_id)
        assignment_count = (
            db.query(PropertyService).filter(PropertyService.vendor_id == vendor_id).count()
        )
        if assignment_count:
            raise ConflictError(
                "Cannot delete vendor with assigned properties.",
                {"assignment_count": assignment_count},
            )
        # vendor_services rows go with the vendor (delete-orphan cascade)
        self.delete(db, vendor)
        logger.info("Vendor deleted", extra={"vendor_id": vendor_id})

    def soft_delete_vendor(self, db: Session, vendor_id: int) -> Vendor:
        vendor = self.soft_delete(db, self.require_active(db, vendor_id))
        logger.info("Vendor soft deleted", extra={"vendor_id": vendor_id})
        return vendor

    def find_invalid_vendor_ids(self, db: Session, vendor_ids: Iterable[int]) -> List[int]:
        """Ids that do not resolve to an active vendor, in request order."""
        ids = list(vendor_ids)
        found = {row.id for row in self.active_query(db).filter(Vendor.id.in_(ids)).all()}
        return [vendor_id for vendor_id in ids if vendor_id not in found]

    def offered_pairs(
        self, db: Session, vendor_ids: Iterable[int], service_ids: Iterable[int]
    ) -> List[Tuple[int, int]]:
        """(vendor_id, service_id) pairs from the association, restricted to both id sets."""
        vendor_ids, service_ids = list(vendor_ids), list(service_ids)
        if not vendor_ids or not service_ids:
            return []
        rows = (
            db.query(VendorService.vendor_id, VendorService.service_id)
            .filter(
                VendorService.vendor_id.in_(vendor_ids),
                VendorService.service_id.in_(service_ids),
            )
            .order_by(VendorService.vendor_id, VendorService.service_id)
            .all()
        )
        return [(row.vendor_id, row.service_id) for row in rows]

    def vendors_by_services(self, db: Session, service_ids: List[int]) -> List[dict]:
        """Active vendors offering at least one of the given services."""
        wanted = set(service_ids)
        result = []
        for vendor in self.list_vendors(db, include_deleted=False):
            matching = sorted(vs.service_id for vs in vendor.vendor_services if vs.service_id in wanted)
            if matching:
                result.append(
                    {
                        "vendor_id": vendor.id,
                        "name": vendor.name,
                        "email": vendor.email,
                        "services": [{"service_id": service_id} for service_id in matching],
                    }
                )
        return result

    def available_services(self, db: Session) -> List[dict]:
        """Active vendors grouped with the active services they offer."""
        result = []
        for vendor in self.list_vendors(db, include_deleted=False):
            services = [
                {"service_id": vs.service_id, "service_type": vs.service.service_type}
                for vs in sorted(vendor.vendor_services, key=lambda vs: vs.service_id)
                if vs.service.record_status == RecordStatus.ACTIVE
            ]
            if services:
                result.append({"vendor_id": vendor.id, "vendor_name": vendor.name, "services": services})
        return result
