import re
from datetime import date, datetime, timezone
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

from enums.property_status import PropertyStatus

PINCODE_PATTERN = re.compile(r"^\d{5,6}$")


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def _check_pincode(value: str) -> str:
    if value and not PINCODE_PATTERN.match(value):
        raise ValueError("Pincode must be 5 or 6 digits")
    return value


def _check_ending_date(value: date) -> date:
    if value < today_utc():
        raise ValueError("Project ending date cannot be in the past")
    return value


IdList = Annotated[List[int], Field(min_length=1)]
Pincode = Annotated[str, AfterValidator(_check_pincode)]
EndingDate = Annotated[date, AfterValidator(_check_ending_date)]


class PropertyCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    owner_name: str = Field(..., min_length=1, max_length=100)
    owner_email: EmailStr
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: Pincode
    project_ending_date: Optional[EndingDate] = None
    service_ids: IdList
    vendor_ids: IdList


class PropertyUpdate(BaseModel):
    """Partial edit; omitted (or empty) fields keep their current value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_name: Optional[str] = Field(None, max_length=100)
    owner_email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[Pincode] = None
    project_ending_date: Optional[date] = None
    service_ids: Optional[IdList] = None
    vendor_ids: Optional[IdList] = None

    @field_validator("owner_email", mode="before")
    @classmethod
    def _blank_email_is_omitted(cls, value):
        return value or None


class PropertyStatusUpdate(BaseModel):
    status: PropertyStatus
