"""
Data Transfer Objects for PharmaTrack.
Defines API request/response schemas and the persisted record shape.
"""
from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pharmatrack.models.drug_model import ExpiryStatus, format_instant


class DrugCreateRequest(BaseModel):
    """Request schema for adding a drug. Fields arrive as raw form text."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", description="Drug or product name")
    quantity: Union[str, int] = Field(default="", description="Number of units")
    expiry_date: str = Field(default="", alias="expiryDate", description="Expiry date as YYYY-MM-DD")


class DrugResponse(BaseModel):
    """Response schema for a drug with its derived flags."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    quantity: int
    expiry_date: datetime = Field(..., alias="expiryDate")
    added_at: datetime = Field(..., alias="addedAt")
    status: ExpiryStatus
    days_until_expiry: int = Field(..., alias="daysUntilExpiry")
    is_low_stock: bool = Field(..., alias="isLowStock")
    is_out_of_stock: bool = Field(..., alias="isOutOfStock")
    expiry_label: str = Field(..., alias="expiryLabel")


class DrugListResponse(BaseModel):
    """Response schema for the inventory snapshot."""
    model_config = ConfigDict(populate_by_name=True)

    drugs: list[DrugResponse]
    count: int
    critical_count: int = Field(..., alias="criticalCount")
    loaded: bool


class PersistedDrugRecord(BaseModel):
    """Shape of one record inside the persisted JSON array."""
    model_config = ConfigDict(strict=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    expiry_date: datetime = Field(..., alias="expiryDate")
    added_at: datetime = Field(..., alias="addedAt")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must contain non-whitespace characters")
        return value

    @field_serializer("expiry_date", "added_at")
    def _serialize_instant(self, value: datetime) -> str:
        return format_instant(value)


class HealthResponse(BaseModel):
    """Response schema for the health check."""
    status: str
    service: str
    version: str
    loaded: Optional[bool] = None
