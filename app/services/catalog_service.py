import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from database.models import PropertyService, Service, VendorService
from schemas.service_schema import ServiceCreate
from services.base_service import BaseService
from utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class CatalogService(BaseService):
    def __init__(self):
        super().__init__(Service)

    def create_service(self, db: Session, payload: ServiceCreate) -> Service:
        duplicate = (
            self.active_query(db)
            .filter(Service.service_type == payload.service_type)
            .first()
        )
        if duplicate:
            raise ConflictError("Service type already exists.")
        service = self.create(db, payload)
        logger.info("Service created", extra={"service_id": service.id})
        return service

    def find_invalid_service_ids(self, db: Session, service_ids: Iterable[int]) -> List[int]:
        """Ids that do not resolve to an active service, in request order."""
        ids = list(service_ids)
        found = {
            row.id
            for row in self.active_query(db).filter(Service.id.in_(ids)).all()
        }
        return [service_id for service_id in ids if service_id not in found]

    def service_types(self, db: Session, service_ids: Iterable[int]) -> dict:
        ids = list(service_ids)
        if not ids:
            return {}
        rows = self.query(db).filter(Service.id.in_(ids)).all()
        return {row.id: row.service_type for row in rows}

    def _guard_references(self, db: Session, service_id: int):
        vendor_count = db.query(VendorService).filter(VendorService.service_id == service_id).count()
        if vendor_count:
            raise ConflictError(
                "Cannot delete service as it is associated with vendors.",
                {"vendor_count": vendor_count},
            )
        assignment_count = (
            db.query(PropertyService).filter(PropertyService.service_id == service_id).count()
        )
        if assignment_count:
            raise ConflictError(
                "Cannot delete service as it is assigned to properties.",
                {"assignment_count": assignment_count},
            )

    def delete_service(self, db: Session, service_id: int) -> None:
        service = self.get(db, service_id)
        if not service:
            raise NotFoundError("Service not found.")
        self._guard_references(db, service_id)
        self.delete(db, service)
        logger.info("Service deleted", extra={"service_id": service_id})

    def soft_delete_service(self, db: Session, service_id: int) -> Service:
        service = self.get_active(db, service_id)
        if not service:
            raise NotFoundError("Service not found or already deleted")
        self._guard_references(db, service_id)
        service = self.soft_delete(db, service)
        logger.info("Service soft deleted", extra={"service_id": service_id})
        return service
