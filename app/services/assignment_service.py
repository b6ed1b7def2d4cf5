"""
Vendor assignment reconciliation for a single property.

``reconcile`` turns the property's current PropertyService rows into the rows
implied by a desired (services, vendors) pair. It validates the ids, checks
that the two sets cover each other, rewrites the rows when either set moved
and notifies vendors that joined or left the property.

The engine works inside the caller's transaction. It flushes but never
commits, and notices are sent after the rows are flushed, so a failed notice
rolls the whole change back with the caller's ``atomic`` block.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from database.models import Agent, Property, PropertyService, Vendor
from enums.reconcile_mode import ReconcileMode
from services.catalog_service import CatalogService
from services.email_service import EmailService
from services.vendor_service import VendorAccountService
from utils.exceptions import (
    InvalidServiceIds,
    InvalidVendorIds,
    UncoveredServices,
    ValidationError,
    VendorsWithNoServices,
)

logger = logging.getLogger(__name__)

catalog_service = CatalogService()
vendor_service = VendorAccountService(catalog_service)


@dataclass
class ReconciliationResult:
    service_ids: List[int]
    vendor_ids: List[int]
    services_changed: bool = False
    vendors_changed: bool = False
    added_vendor_ids: List[int] = field(default_factory=list)
    removed_vendor_ids: List[int] = field(default_factory=list)
    # vendor id -> [(service_id, service_type)] for the rows written by this call
    assignments: Dict[int, List[Tuple[int, str]]] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return self.services_changed or self.vendors_changed


def _unique(ids: Iterable[int]) -> List[int]:
    return list(dict.fromkeys(ids))


def _check_coverage(
    service_ids: Set[int],
    vendor_ids: Set[int],
    pairs: List[Tuple[int, int]],
    check_services: bool,
    check_vendors: bool,
):
    if check_services:
        covered = {service_id for _, service_id in pairs}
        uncovered = sorted(service_ids - covered)
        if uncovered:
            raise UncoveredServices(uncovered)
    if check_vendors:
        busy = {vendor_id for vendor_id, _ in pairs}
        idle = sorted(vendor_ids - busy)
        if idle:
            raise VendorsWithNoServices(idle)


async def reconcile(
    db: Session,
    property: Property,
    agent: Agent,
    notifier: EmailService,
    desired_service_ids: Optional[List[int]] = None,
    desired_vendor_ids: Optional[List[int]] = None,
    mode: ReconcileMode = ReconcileMode.EDIT,
) -> ReconciliationResult:
    if mode == ReconcileMode.CREATE and (desired_service_ids is None or desired_vendor_ids is None):
        raise ValidationError("Services and vendors are required when creating a property")

    current_rows = (
        db.query(PropertyService).filter(PropertyService.property_id == property.id).all()
    )
    current_services = {row.service_id for row in current_rows}
    current_vendors = {row.vendor_id for row in current_rows}

    services_supplied = desired_service_ids is not None
    vendors_supplied = desired_vendor_ids is not None

    if services_supplied:
        desired_service_ids = _unique(desired_service_ids)
        invalid = catalog_service.find_invalid_service_ids(db, desired_service_ids)
        if invalid:
            raise InvalidServiceIds(invalid)
    if vendors_supplied:
        desired_vendor_ids = _unique(desired_vendor_ids)
        invalid = vendor_service.find_invalid_vendor_ids(db, desired_vendor_ids)
        if invalid:
            raise InvalidVendorIds(invalid)

    final_services = set(desired_service_ids) if services_supplied else current_services
    final_vendors = set(desired_vendor_ids) if vendors_supplied else current_vendors

    pairs = vendor_service.offered_pairs(db, final_vendors, final_services)
    if mode == ReconcileMode.CREATE:
        _check_coverage(final_services, final_vendors, pairs, check_services=True, check_vendors=True)
    else:
        # Edits keep whatever pairs are offered; only supplied vendors must hold a service
        _check_coverage(final_services, final_vendors, pairs, check_services=False, check_vendors=vendors_supplied)

    result = ReconciliationResult(
        service_ids=sorted(final_services),
        vendor_ids=sorted(final_vendors),
        services_changed=final_services != current_services,
        vendors_changed=final_vendors != current_vendors,
    )
    if not result.changed:
        logger.info("Assignments unchanged", extra={"property_id": property.id})
        return result

    previous: Dict[int, List[int]] = {}
    for row in sorted(current_rows, key=lambda row: (row.vendor_id, row.service_id)):
        previous.setdefault(row.vendor_id, []).append(row.service_id)

    for row in current_rows:
        db.delete(row)
    db.flush()

    assigned_at = datetime.now(timezone.utc)
    for vendor_id, service_id in pairs:
        db.add(
            PropertyService(
                property_id=property.id,
                vendor_id=vendor_id,
                service_id=service_id,
                assigned_by_agent_id=agent.id,
                assigned_at=assigned_at,
            )
        )
    db.flush()
    db.expire(property, ["property_services"])

    service_types = catalog_service.service_types(db, final_services | current_services)
    for vendor_id, service_id in pairs:
        result.assignments.setdefault(vendor_id, []).append((service_id, service_types.get(service_id)))

    result.removed_vendor_ids = sorted(current_vendors - final_vendors)
    result.added_vendor_ids = sorted(final_vendors - current_vendors)

    logger.info(
        "Assignments rewritten: %d rows, %d vendors added, %d removed",
        len(pairs),
        len(result.added_vendor_ids),
        len(result.removed_vendor_ids),
        extra={"property_id": property.id, "agent_id": agent.id},
    )

    await _notify_vendors(db, property, agent, notifier, previous, result, service_types)
    return result


async def _notify_vendors(
    db: Session,
    property: Property,
    agent: Agent,
    notifier: EmailService,
    previous: Dict[int, List[int]],
    result: ReconciliationResult,
    service_types: Dict[int, str],
):
    """Cancellation notices for vendors that left, assignment notices for vendors that joined."""
    vendor_ids = result.removed_vendor_ids + result.added_vendor_ids
    if not vendor_ids:
        return
    vendors = {vendor.id: vendor for vendor in db.query(Vendor).filter(Vendor.id.in_(vendor_ids)).all()}

    for vendor_id in result.removed_vendor_ids:
        types = [service_types.get(service_id) for service_id in previous.get(vendor_id, [])]
        await notifier.send_vendor_cancellation_email(
            vendors[vendor_id].email, agent.name, property.address, types
        )
    for vendor_id in result.added_vendor_ids:
        types = [service_type for _, service_type in result.assignments.get(vendor_id, [])]
        await notifier.send_vendor_assignment_email(
            vendors[vendor_id].email, agent.name, property.address, types
        )
