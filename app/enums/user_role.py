from enum import Enum


class UserRole(str, Enum):
    """Role claim carried by every access token"""

    ADMIN = "admin"
    AGENT = "agent"
    VENDOR = "vendor"

    def __str__(self):
        return self.value
