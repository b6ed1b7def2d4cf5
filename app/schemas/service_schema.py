from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class ServiceCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    service_type: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_type: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class ServiceSummary(BaseModel):
    service_id: int
    service_type: str
    description: Optional[str] = None


class ServiceSelection(BaseModel):
    service_ids: List[int] = Field(..., min_length=1)
