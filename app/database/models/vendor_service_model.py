from database.init import Base

from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship


class VendorService(Base):
    __tablename__ = "vendor_services"

    vendor_id = Column(Integer, ForeignKey("vendors.id"), primary_key=True)
    service_id = Column(Integer, ForeignKey("services.id"), primary_key=True)

    vendor = relationship("Vendor", back_populates="vendor_services")
    service = relationship("Service", back_populates="vendor_services")
