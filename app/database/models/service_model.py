from database.init import Base
from enums.record_status import RecordStatus

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    # Unique among active services only, checked in the catalog service
    service_type = Column(String(100), index=True, nullable=False)
    description = Column(String(2000), nullable=True)
    record_status = Column(Enum(RecordStatus), default=RecordStatus.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    vendor_services = relationship("VendorService", back_populates="service")
    property_services = relationship("PropertyService", back_populates="service")
