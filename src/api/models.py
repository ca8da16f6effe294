"""
Immutable data models for API responses and requests.
"""
from typing import Optional, Dict, Any, List
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_serializer


class FetchFormat(str, Enum):
    """Message formats accepted by the fetch endpoint."""
    FULL = "full"
    METADATA = "metadata"


class APIResponse(BaseModel):
    """Base API response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool = Field(..., description="Whether the request was successful")
    message: str = Field(..., description="Response message")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ErrorResponse(APIResponse):
    """Error response model."""
    error_code: Optional[str] = Field(None, description="Error code for debugging")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Health check response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="API version")
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Dependency statuses")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class EmailMessage(BaseModel):
    """A normalized Gmail message."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Gmail message ID")
    thread_id: Optional[str] = Field(None, description="Gmail thread ID")
    from_name: str = Field(..., description="Sender display name, falling back to the address")
    from_email: str = Field("", description="Sender address")
    subject: str = Field(..., description="Subject or placeholder")
    date: str = Field(..., description="Locale-formatted date or the raw header")
    body: str = Field(..., description="Decoded text body or the snippet")
    snippet: str = Field("", description="Provider preview text")
    internal_date: Optional[int] = Field(None, description="Receive time in unix seconds")
    is_error: bool = Field(False, description="True for messages that could not be loaded")


class EmailListResponse(APIResponse):
    """Response model for fetched messages."""
    data: List[EmailMessage] = Field(..., description="Messages in mailbox order")


class StoredEmailListResponse(APIResponse):
    """Response model for stored emails."""
    data: List[Dict[str, Any]] = Field(..., description="Stored emails, newest first")


class SendEmailRequest(BaseModel):
    """Request model for sending an email."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    to: Optional[str] = Field(None, description="Recipient address")
    subject: Optional[str] = Field(None, description="Subject line")
    body: Optional[str] = Field(None, description="Plain-text body")


class SendEmailResponse(APIResponse):
    """Response model for a sent email."""
    data: Dict[str, Any] = Field(..., description="Send result including the Gmail message ID")


class AssignEmailRequest(BaseModel):
    """Request model for linking a stored email to a booking."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    email_id: str = Field(..., description="Stored email ID")
    booking_id: Optional[str] = Field(None, description="Booking ID, null to unassign")


class AssignEmailResponse(APIResponse):
    """Response model for an email assignment."""
    data: Dict[str, Any] = Field(..., description="Assignment result")
