"""
Domain errors raised by the service layer.

Each error knows how to render itself through the shared response builders,
so routes and the application-level handlers never map status codes by hand.
"""

from typing import Iterable, List, Optional

from responses.error import (
    bad_request_error,
    conflict_error,
    internal_server_error,
    not_found_error,
    unauthorized_error,
)


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, data: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def response(self):
        return internal_server_error(self.message)


class ValidationError(AppError):
    status_code = 400

    def response(self):
        return bad_request_error(self.message, self.data)


class ConflictError(AppError):
    status_code = 400

    def response(self):
        return conflict_error(self.message, self.data)


class NotFoundError(AppError):
    status_code = 404

    def response(self):
        return not_found_error(self.message)


class AuthError(AppError):
    status_code = 401

    def response(self):
        return unauthorized_error(self.message)


class DependencyFailure(AppError):
    """An external collaborator (mail relay, database) failed"""

    status_code = 500


def _join(ids: Iterable[int]) -> str:
    return ", ".join(str(i) for i in ids)


class InvalidServiceIds(ValidationError):
    def __init__(self, ids: List[int]):
        super().__init__(f"Invalid Service IDs: {_join(ids)}", {"invalid_service_ids": list(ids)})
        self.ids = list(ids)


class InvalidVendorIds(ValidationError):
    def __init__(self, ids: List[int]):
        super().__init__(f"Invalid Vendor IDs: {_join(ids)}", {"invalid_vendor_ids": list(ids)})
        self.ids = list(ids)


class UncoveredServices(ValidationError):
    def __init__(self, ids: List[int]):
        super().__init__(
            f"No vendors offer the following services: {_join(ids)}",
            {"uncovered_service_ids": list(ids)},
        )
        self.ids = list(ids)


class VendorsWithNoServices(ValidationError):
    def __init__(self, ids: List[int]):
        super().__init__(
            f"Vendors {_join(ids)} don't offer any of the requested services.",
            {"vendor_ids_without_services": list(ids)},
        )
        self.ids = list(ids)


class NoSuchVendor(ValidationError):
    def __init__(self):
        super().__init__("Please contact admin")


class OtpExpiredOrInvalid(ValidationError):
    def __init__(self):
        super().__init__("OTP expired or invalid")


class InvalidOtp(AuthError):
    def __init__(self):
        super().__init__("Invalid OTP")
