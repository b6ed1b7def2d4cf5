from database.init import Base

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship


class PropertyService(Base):
    """One active (property, vendor, service) assignment"""

    __tablename__ = "property_services"

    property_id = Column(Integer, ForeignKey("properties.id"), primary_key=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), primary_key=True)
    service_id = Column(Integer, ForeignKey("services.id"), primary_key=True)
    assigned_by_agent_id = Column(Integer, ForeignKey("agents.id"), nullable=False)
    assigned_at = Column(DateTime(timezone=True), nullable=False)

    property = relationship("Property", back_populates="property_services")
    vendor = relationship("Vendor", back_populates="property_services")
    service = relationship("Service", back_populates="property_services")
    assigned_by = relationship("Agent")
