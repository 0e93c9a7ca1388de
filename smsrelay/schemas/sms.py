"""
Pydantic schemas for SMS relay API operations.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class RecipientIn(BaseModel):
    """One recipient of a bulk send."""
    phone: Optional[str] = Field(None, description="10-digit Indian mobile number, optionally with +91")
    message: Optional[str] = Field(None, description="Literal message text; overrides the template")
    template_vars: Optional[List[Any]] = Field(
        None,
        alias="templateVars",
        description="Values substituted for {#var#} placeholders, in order"
    )

    class Config:
        """Pydantic config."""
        populate_by_name = True


class BulkSendRequest(BaseModel):
    """Schema for bulk SMS request."""
    template: Optional[str] = Field(None, description="Message template with {#var#} placeholders")
    templateid: Optional[str] = Field(None, description="DLT template identifier")
    recipients: Optional[List[RecipientIn]] = Field(None, description="Recipients to message")


class SingleSendRequest(BaseModel):
    """Schema for the single SMS convenience request."""
    phone: Optional[str] = Field(None, description="Recipient phone number")
    message: Optional[str] = Field(None, description="Message content")


class DispatchOutcome(BaseModel):
    """Delivery outcome for one recipient."""
    phone: str = Field(..., description="Recipient phone number as submitted")
    success: bool = Field(..., description="Whether the gateway accepted the message")
    guid: Optional[str] = Field(None, description="Gateway correlation id shared by the batch")
    seqno: Optional[str] = Field(None, description="Gateway sequence number for this recipient")
    error_code: Optional[str] = Field(None, alias="errorCode", description="Gateway error code if failed")
    error: Optional[str] = Field(None, description="Error message if failed")

    class Config:
        """Pydantic config."""
        populate_by_name = True


class SendSummary(BaseModel):
    total: int
    successful: int
    failed: int


class BulkSendResponse(BaseModel):
    """Schema for bulk SMS response."""
    success: bool = Field(True, description="Always true once dispatch ran; see summary")
    message: str = Field(..., description="Human readable summary")
    summary: SendSummary
    results: List[DispatchOutcome]

    @classmethod
    def from_outcomes(cls, outcomes: List[DispatchOutcome]) -> "BulkSendResponse":
        successful = sum(1 for outcome in outcomes if outcome.success)
        failed = len(outcomes) - successful
        return cls(
            message=f"Sent {successful} SMS, {failed} failed",
            summary=SendSummary(total=len(outcomes), successful=successful, failed=failed),
            results=outcomes,
        )


class TokenStatusResponse(BaseModel):
    """Schema for gateway token status."""
    valid: bool
    expiresIn: str = Field(..., description="Remaining lifetime like '143h 59m', or 'expired'")
    expiresAt: Optional[str] = Field(None, description="ISO 8601 expiry when valid")
