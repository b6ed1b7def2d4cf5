from fastapi import status
from .base import build_response


def bad_request_error(error: str = "Bad request", data=None):
    return build_response(
        status.HTTP_400_BAD_REQUEST,
        "failure",
        error="bad_request",
        message=error,
        data=data,
    )


def conflict_error(error: str = "Credentials already exists", data=None):
    # Conflicts share the 400 status with validation failures
    return build_response(
        status.HTTP_400_BAD_REQUEST,
        "failure",
        error="conflict",
        message=error,
        data=data,
    )


def not_found_error(error: str = "Resource not found"):
    return build_response(
        status.HTTP_404_NOT_FOUND,
        "failure",
        error="not_found",
        message=error,
    )


def unauthorized_error(error: str = "Invalid credentials"):
    return build_response(
        status.HTTP_401_UNAUTHORIZED,
        "failure",
        error="unauthorized",
        message=error,
    )


def internal_server_error(error: str = "Internal server error"):
    return build_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "failure",
        error="internal_server_error",
        message=error,
    )
