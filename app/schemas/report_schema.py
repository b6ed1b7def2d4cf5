from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class PersonSummary(BaseModel):
    id: int
    name: str
    email: str


class StatusCount(BaseModel):
    status: str
    count: int = 0


class RecentAssignment(BaseModel):
    property_id: int
    address: str
    city: str
    state: str
    pincode: str
    owner_name: str
    owner_email: str
    status: str
    assigned_at: datetime
    service_type: str
    vendor: PersonSummary
    agent: PersonSummary


class DashboardStats(BaseModel):
    """Admin dashboard figures; only live services, vendors and agents are counted"""

    total_assignments: int = 0
    completed_assignments: int = 0
    total_vendors: int = 0
    total_agents: int = 0
    total_services: int = 0
    active_cities: List[str] = []
    status_breakdown: List[StatusCount] = []
    service_types: List[str] = []
    recent_assignments: List[RecentAssignment] = []
    generated_at: Optional[datetime] = None
