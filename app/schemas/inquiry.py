from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import InquiryStatus


class InquiryOut(BaseModel):
    id: str
    name: str
    contact: str
    cake_type: str
    event_type: Optional[str]
    delivery_option: str
    delivery_location: Optional[str]
    date_needed: str
    additional_notes: Optional[str]
    status: InquiryStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


class InquiryStats(BaseModel):
    total: int
    new: int
    confirmed: int
    completed: int


class IntakeSuccess(BaseModel):
    success: bool = True
    id: str
    message: str = "Inquiry submitted successfully"


class IntakeError(BaseModel):
    error: str
    rate_limited: Optional[bool] = Field(default=None, alias="rateLimited")
