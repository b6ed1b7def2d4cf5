import logging
from typing import Optional

from sqlalchemy.orm import Session

from services.base_service import BaseService, ModelType
from utils.exceptions import ConflictError, NotFoundError
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class AccountService(BaseService):
    """Identity store operations shared by admins, agents and vendors."""

    # Human readable name used in messages ("Admin", "Agent", "Vendor")
    label = "Account"

    def get_by_email(self, db: Session, email: str) -> Optional[ModelType]:
        return self.query(db).filter(self.model.email == email).first()

    def get_active_by_email(self, db: Session, email: str) -> Optional[ModelType]:
        return self.active_query(db).filter(self.model.email == email).first()

    def require(self, db: Session, account_id: int) -> ModelType:
        account = self.get(db, account_id)
        if not account:
            raise NotFoundError(f"{self.label} not found.")
        return account

    def require_active(self, db: Session, account_id: int) -> ModelType:
        account = self.get_active(db, account_id)
        if not account:
            raise NotFoundError(f"{self.label} not found or already deleted")
        return account

    def ensure_email_available(self, db: Session, email: str, exclude_id: Optional[int] = None):
        query = self.query(db).filter(self.model.email == email)
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        if query.first():
            raise ConflictError(f"{self.label} with this email already exists.")

    def build(self, name: str, email: str, password: str) -> ModelType:
        return self.model(name=name, email=email, hashed_password=hash_password(password))

    def create_account(self, db: Session, name: str, email: str, password: str, commit: bool = True):
        self.ensure_email_available(db, email)
        account = self.create(db, self.build(name, email, password), commit=commit)
        logger.info("%s account created", self.label, extra={"role": self.label.lower()})
        return account

    def update_account(self, db: Session, account: ModelType, name: Optional[str], email: Optional[str]):
        values = {}
        if name:
            values["name"] = name
        if email and email != account.email:
            self.ensure_email_available(db, email, exclude_id=account.id)
            values["email"] = email
        if not values:
            return account
        return self.update(db, account, values)

    def authenticate(self, db: Session, email: str, password: str) -> Optional[ModelType]:
        """Active account whose password matches, or None."""
        account = self.get_active_by_email(db, email)
        if not account or not verify_password(password, account.hashed_password):
            return None
        return account
