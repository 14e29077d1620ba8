"""API package initialization."""
from calendar_admin.api.models import BookedDatesResponse, DateRequest, ErrorResponse, MutationResponse

__all__ = ["BookedDatesResponse", "DateRequest", "ErrorResponse", "MutationResponse"]
