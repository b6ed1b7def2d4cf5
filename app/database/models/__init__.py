from .admin_model import Admin
from .agent_model import Agent
from .vendor_model import Vendor
from .service_model import Service
from .vendor_service_model import VendorService
from .property_model import Property
from .property_service_model import PropertyService

__all__ = ["Admin", "Agent", "Vendor", "Service", "VendorService", "Property", "PropertyService"]
