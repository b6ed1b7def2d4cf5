from enum import Enum


class RecordStatus(str, Enum):
    """Soft-delete state of an account or catalog row"""

    ACTIVE = "active"
    DELETED = "deleted"

    def __str__(self):
        return self.value
