import os

# Must be set before the app modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["EMAIL_SUPPRESS_SEND"] = "true"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from database.init import Base, SessionLocal, engine
from database.models import Admin, Agent, Property, PropertyService, Service, Vendor, VendorService
from enums.record_status import RecordStatus
from enums.user_role import UserRole
from main import app
from services.email_service import get_email_service
from services.otp_service import InMemoryOtpStore
from utils.dependencies import get_otp_store
from utils.exceptions import DependencyFailure
from utils.security import create_access_token, hash_password

PASSWORD = "secret123"


class FakeEmailService:
    """Records every message instead of talking to a mail relay."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def _record(self, kind, email, **details):
        if self.fail:
            raise DependencyFailure(f"Failed to send email to {email}: relay down")
        self.sent.append({"kind": kind, "to": email, **details})

    async def send_invitation_email(self, email, role):
        await self._record("invitation", email, role=role)

    async def send_vendor_assignment_email(self, email, agent_name, address, service_types):
        await self._record("assignment", email, agent=agent_name, address=address, service_types=service_types)

    async def send_vendor_cancellation_email(self, email, agent_name, address, service_types):
        await self._record("cancellation", email, agent=agent_name, address=address, service_types=service_types)

    async def send_otp_email(self, email, otp):
        await self._record("otp", email, otp=otp)

    def of_kind(self, kind):
        return [m for m in self.sent if m["kind"] == kind]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(autouse=True)
def fresh_schema():
    SessionLocal.remove()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    SessionLocal.remove()


@pytest.fixture
def mailer():
    return FakeEmailService()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def otp_store(clock):
    return InMemoryOtpStore(clock=clock)


@pytest.fixture
def client(mailer, otp_store):
    app.dependency_overrides[get_email_service] = lambda: mailer
    app.dependency_overrides[get_otp_store] = lambda: otp_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _add(obj):
    db = SessionLocal()
    try:
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return int(obj.id)
    finally:
        db.close()


def mk_admin(email: str = "admin@example.com", name: str = "Admin", deleted: bool = False) -> int:
    return _add(
        Admin(
            name=name,
            email=email,
            hashed_password=hash_password(PASSWORD),
            record_status=RecordStatus.DELETED if deleted else RecordStatus.ACTIVE,
        )
    )


def mk_agent(email: str = "agent@example.com", name: str = "Agent Smith", deleted: bool = False) -> int:
    return _add(
        Agent(
            name=name,
            email=email,
            hashed_password=hash_password(PASSWORD),
            record_status=RecordStatus.DELETED if deleted else RecordStatus.ACTIVE,
        )
    )


def mk_service(service_type: str, deleted: bool = False) -> int:
    return _add(
        Service(
            service_type=service_type,
            description=f"{service_type} work",
            record_status=RecordStatus.DELETED if deleted else RecordStatus.ACTIVE,
        )
    )


def mk_vendor(email: str, service_ids: List[int], name: Optional[str] = None, deleted: bool = False) -> int:
    vendor_id = _add(
        Vendor(
            name=name or email.split("@")[0],
            email=email,
            hashed_password=hash_password(PASSWORD),
            record_status=RecordStatus.DELETED if deleted else RecordStatus.ACTIVE,
        )
    )
    db = SessionLocal()
    try:
        for service_id in service_ids:
            db.add(VendorService(vendor_id=vendor_id, service_id=service_id))
        db.commit()
    finally:
        db.close()
    return vendor_id


def mk_property(agent_id: int, address: str = "12 Main St", city: str = "Pune") -> int:
    return _add(
        Property(
            agent_id=agent_id,
            address=address,
            city=city,
            state="MH",
            pincode="411001",
            owner_name="Owner",
            owner_email="owner@example.com",
        )
    )


def assignment_pairs(property_id: int) -> set:
    db = SessionLocal()
    try:
        rows = db.query(PropertyService).filter(PropertyService.property_id == property_id).all()
        return {(row.vendor_id, row.service_id) for row in rows}
    finally:
        db.close()


def auth_headers(email: str, role: UserRole, name: str = "User") -> dict:
    token, _ = create_access_token(email, role, name)
    return {"Authorization": f"Bearer {token}"}


def admin_headers(email: str = "admin@example.com") -> dict:
    return auth_headers(email, UserRole.ADMIN, "Admin")


def agent_headers(email: str = "agent@example.com") -> dict:
    return auth_headers(email, UserRole.AGENT, "Agent Smith")
