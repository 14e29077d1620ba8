"""Pydantic models for API request/response validation."""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DateRequest(BaseModel):
    """Request body for block/unblock endpoints."""
    date: Optional[str] = Field(
        None,
        max_length=32,
        description="Date in DD-MM-YYYY format",
        examples=["15-03-2025"]
    )

    # Legacy clients still send "secret" in the body; it is ignored.
    model_config = ConfigDict(extra="ignore")


class BookedDatesResponse(BaseModel):
    """Response schema for GET /api/booked-dates."""
    success: bool = True
    dates: List[str] = Field(default_factory=list, description="Blocked dates, oldest first")
    total: int = Field(0, description="Number of blocked dates")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "dates": ["15-03-2025", "20-03-2025"],
                "total": 2
            }
        }
    )


class MutationResponse(BaseModel):
    """Response schema for successful block/unblock."""
    success: bool = True
    message: str
    dates: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Date 15-03-2025 blocked",
                "dates": ["15-03-2025"]
            }
        }
    )


class ErrorResponse(BaseModel):
    """Error response schema."""
    success: bool = False
    message: str = Field(..., description="Human-readable error")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Date 15-03-2025 is already blocked"
            }
        }
    )
