import logging

from sqlalchemy.orm import Session

from database.models import Admin
from services.account_service import AccountService
from utils.exceptions import ConflictError

logger = logging.getLogger(__name__)


class AdminService(AccountService):
    label = "Admin"

    def __init__(self):
        super().__init__(Admin)

    def _guard_removal(self, db: Session, admin: Admin, acting_email: str):
        # Both guards run before anything is written
        if self.is_active(admin) and self.active_query(db).count() <= 1:
            raise ConflictError("Cannot delete the last admin")
        if admin.email == acting_email:
            raise ConflictError("Cannot delete your own account")

    def delete_admin(self, db: Session, admin_id: int, acting_email: str) -> None:
        admin = self.require(db, admin_id)
        self._guard_removal(db, admin, acting_email)
        self.delete(db, admin)
        logger.info("Admin deleted", extra={"admin_id": admin_id})

    def soft_delete_admin(self, db: Session, admin_id: int, acting_email: str) -> Admin:
        admin = self.require_active(db, admin_id)
        self._guard_removal(db, admin, acting_email)
        admin = self.soft_delete(db, admin)
        logger.info("Admin soft deleted", extra={"admin_id": admin_id})
        return admin
