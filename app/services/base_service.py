from typing import Type, TypeVar, Optional, List
from pydantic import BaseModel
from sqlalchemy.orm import Session, Query

from enums.record_status import RecordStatus

ModelType = TypeVar('ModelType')


class BaseService:
    """
    Repository helpers shared by every soft-deletable entity.

    ``active_query`` is the only place that knows how soft deletion is
    represented; callers that want live rows go through it.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def query(self, db: Session) -> Query:
        return db.query(self.model)

    def active_query(self, db: Session) -> Query:
        return db.query(self.model).filter(self.model.record_status == RecordStatus.ACTIVE)

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_active(self, db: Session, id: int) -> Optional[ModelType]:
        return self.active_query(db).filter(self.model.id == id).first()

    def get_all(self, db: Session, include_deleted: bool = True) -> List[ModelType]:
        query = self.query(db) if include_deleted else self.active_query(db)
        return query.order_by(self.model.id).all()

    def create(self, db: Session, obj_in, commit: bool = True) -> ModelType:
        """
        Add a new record.

        Args:
            db: Database session
            obj_in: Either a SQLAlchemy model or a Pydantic schema
            commit: Commit immediately; pass False inside a larger transaction

        Returns:
            The created model instance
        """
        if isinstance(obj_in, BaseModel):
            db_obj = self.model(**obj_in.model_dump())
        else:
            db_obj = obj_in

        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def update(self, db: Session, db_obj: ModelType, values: dict) -> ModelType:
        for key, value in values.items():
            setattr(db_obj, key, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, db_obj: ModelType) -> None:
        db.delete(db_obj)
        db.commit()

    def soft_delete(self, db: Session, db_obj: ModelType) -> ModelType:
        db_obj.record_status = RecordStatus.DELETED
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def is_active(self, db_obj: ModelType) -> bool:
        return db_obj.record_status == RecordStatus.ACTIVE
