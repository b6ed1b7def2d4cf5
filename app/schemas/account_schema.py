from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import datetime

from .service_schema import ServiceSummary


class AccountCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class AdminCreate(AccountCreate):
    pass


class AgentCreate(AccountCreate):
    pass


class VendorCreate(AccountCreate):
    service_ids: List[int] = Field(..., min_length=1)


class AccountUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None


class AgentUpdate(AccountUpdate):
    pass


class VendorUpdate(AccountUpdate):
    # None keeps the current offering; a list replaces it
    service_ids: Optional[List[int]] = None


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None


class VendorResponse(AccountResponse):
    services: List[ServiceSummary] = []
