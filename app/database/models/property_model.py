from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database.init import Base
from enums.property_status import PropertyStatus


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(Integer, ForeignKey("agents.id"), nullable=False, index=True)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(6), nullable=False)
    owner_name = Column(String(100), nullable=False)
    owner_email = Column(String(100), nullable=False)
    project_ending_date = Column(Date, nullable=True)
    status = Column(
        Enum(PropertyStatus, values_callable=lambda e: [m.value for m in e]),
        default=PropertyStatus.NEW,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    agent = relationship("Agent", back_populates="properties")
    property_services = relationship(
        "PropertyService", back_populates="property", cascade="all, delete-orphan"
    )
