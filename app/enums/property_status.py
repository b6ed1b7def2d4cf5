from enum import Enum


class PropertyStatus(str, Enum):
    NEW = "New"
    CANCELLED = "Cancelled"
    INVOICED = "Invoiced"
    PAID = "Paid"

    def __str__(self):
        return self.value
