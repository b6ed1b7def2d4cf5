"""
One-time password login for vendors.

Codes are kept in an ``OtpStore`` keyed by email. The store is created when
the application starts and handed to routes through a dependency, so an
external cache can replace ``InMemoryOtpStore`` without touching callers.
"""

import hmac
import logging
import secrets
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from config import OTP_TTL_SECONDS
from services.email_service import EmailService
from services.vendor_service import VendorAccountService
from utils.exceptions import DependencyFailure, InvalidOtp, NoSuchVendor, OtpExpiredOrInvalid

logger = logging.getLogger(__name__)


class OtpStore:
    """Key-value store with per-key expiry."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        pass


class InMemoryOtpStore(OtpStore):
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[str, float]] = {}

    def get(self, key):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key, value, ttl_seconds):
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    def delete(self, key):
        with self._lock:
            self._entries.pop(key, None)

    def clear(self):
        with self._lock:
            self._entries.clear()


def generate_otp() -> str:
    return str(secrets.randbelow(900000) + 100000)


def _key(email: str) -> str:
    return f"otp:{email.lower()}"


class OtpService:
    def __init__(self, store: OtpStore, vendors: VendorAccountService = None, ttl_seconds: int = OTP_TTL_SECONDS):
        self.store = store
        self.vendors = vendors or VendorAccountService()
        self.ttl_seconds = ttl_seconds

    async def request_otp(self, db: Session, email: str, email_service: EmailService) -> None:
        vendor = self.vendors.get_active_by_email(db, email)
        if not vendor:
            raise NoSuchVendor()

        otp = generate_otp()
        # A newer code replaces any outstanding one and restarts its expiry
        key = _key(vendor.email)
        self.store.set(key, otp, self.ttl_seconds)
        try:
            await email_service.send_otp_email(vendor.email, otp)
        except DependencyFailure:
            self.store.delete(key)
            raise
        logger.info("OTP issued", extra={"vendor_id": vendor.id})

    def verify_otp(self, db: Session, email: str, otp: str):
        """Consume a matching code and return the vendor it was issued for."""
        key = _key(email)
        stored = self.store.get(key)
        if stored is None:
            raise OtpExpiredOrInvalid()
        if not hmac.compare_digest(stored, otp):
            raise InvalidOtp()

        self.store.delete(key)
        vendor = self.vendors.get_active_by_email(db, email)
        if not vendor:
            raise NoSuchVendor()
        logger.info("OTP verified", extra={"vendor_id": vendor.id})
        return vendor
