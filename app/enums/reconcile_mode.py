from enum import Enum


class ReconcileMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"
