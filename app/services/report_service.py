from collections import Counter
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from database.models import Agent, Property, PropertyService, Service, Vendor
from enums.record_status import RecordStatus
from schemas.report_schema import DashboardStats, PersonSummary, RecentAssignment, StatusCount

RECENT_LIMIT = 5


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ReportService:
    def __init__(self, db: Session):
        self.db = db

    def _live_assignments(self) -> List[tuple]:
        """Assignment rows whose service, vendor and agent are all active."""
        return (
            self.db.query(PropertyService, Property, Service, Vendor, Agent)
            .join(Property, PropertyService.property_id == Property.id)
            .join(Service, PropertyService.service_id == Service.id)
            .join(Vendor, PropertyService.vendor_id == Vendor.id)
            .join(Agent, PropertyService.assigned_by_agent_id == Agent.id)
            .filter(
                Service.record_status == RecordStatus.ACTIVE,
                Vendor.record_status == RecordStatus.ACTIVE,
                Agent.record_status == RecordStatus.ACTIVE,
            )
            .all()
        )

    def _count_active(self, model) -> int:
        return self.db.query(model).filter(model.record_status == RecordStatus.ACTIVE).count()

    def get_dashboard_stats(self) -> DashboardStats:
        report_time = datetime.now(timezone.utc)
        rows = self._live_assignments()

        statuses = Counter(prop.status.value for _, prop, _, _, _ in rows)
        cities = sorted({prop.city for _, prop, _, _, _ in rows})
        service_types = sorted(
            {
                service.service_type
                for service in self.db.query(Service).filter(Service.record_status == RecordStatus.ACTIVE)
            }
        )

        recent = sorted(rows, key=lambda row: _as_utc(row[0].assigned_at), reverse=True)[:RECENT_LIMIT]

        return DashboardStats(
            total_assignments=len(rows),
            completed_assignments=sum(1 for ps, *_ in rows if _as_utc(ps.assigned_at) < report_time),
            total_vendors=self._count_active(Vendor),
            total_agents=self._count_active(Agent),
            total_services=self._count_active(Service),
            active_cities=cities,
            status_breakdown=[StatusCount(status=status, count=count) for status, count in sorted(statuses.items())],
            service_types=service_types,
            recent_assignments=[
                RecentAssignment(
                    property_id=prop.id,
                    address=prop.address,
                    city=prop.city,
                    state=prop.state,
                    pincode=prop.pincode,
                    owner_name=prop.owner_name,
                    owner_email=prop.owner_email,
                    status=prop.status.value,
                    assigned_at=ps.assigned_at,
                    service_type=service.service_type,
                    vendor=PersonSummary(id=vendor.id, name=vendor.name, email=vendor.email),
                    agent=PersonSummary(id=agent.id, name=agent.name, email=agent.email),
                )
                for ps, prop, service, vendor, agent in recent
            ],
            generated_at=report_time,
        )
