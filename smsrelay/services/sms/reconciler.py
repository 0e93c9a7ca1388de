"""
Parsing of Pragati send responses and mapping them back onto recipients.

The gateway answers a send with a query-string-like body::

    guid=<id>&errorcode=0,0,7,0&seqno=9198...,9198...

with one error code (and sequence number) per recipient, in request order.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from smsrelay.schemas.sms import DispatchOutcome
from smsrelay.services.sms.recipients import Recipient

logger = logging.getLogger("smsrelay.reconciler")

SUCCESS_CODE = "0"

ERROR_MESSAGES: Dict[str, str] = {
    "1": "Invalid Receiver - Mobile number is invalid or greater than 16 digits",
    "2": "Invalid Sender - Wrong sender ID or greater than 16 digits",
    "3": "Invalid Message - Blank message or template does not match DLT template ID",
    "4": "Service not available - Operator or server down",
    "5": "Authorization failed - Wrong credentials",
    "6": "Contract Expired",
    "7": "Credit Expired - Account balance is zero",
    "8": "Empty Receiver - No recipient number provided",
    "14": "Non-compliant message - Violates TRAI guidelines or template mismatch",
}


@dataclass
class GatewayResult:
    success: bool
    error_code: str
    guid: Optional[str] = None
    error_message: Optional[str] = None
    seqno: Optional[str] = None


def describe_error_code(code: str) -> str:
    return ERROR_MESSAGES.get(code, f"Unknown error code: {code}")


def _field(text: str, name: str) -> Optional[str]:
    match = re.search(rf"(?:^|&){name}=([^&]+)", text)
    return match.group(1).strip() if match else None


def parse_gateway_response(text: str) -> List[GatewayResult]:
    """
    Parse a send response into one result per error code.

    Args:
        text: Raw response body

    Returns:
        List[GatewayResult]: Results in recipient order; never empty
    """
    text = (text or "").strip()
    guid = _field(text, "guid")
    codes = (_field(text, "errorcode") or SUCCESS_CODE).split(",")
    seqnos_field = _field(text, "seqno")
    seqnos = seqnos_field.split(",") if seqnos_field else []

    results = []
    for index, raw_code in enumerate(codes):
        code = raw_code.strip()
        seqno = seqnos[index].strip() if index < len(seqnos) else None
        success = code == SUCCESS_CODE
        results.append(GatewayResult(
            success=success,
            error_code=code,
            guid=guid if success else None,
            error_message=None if success else describe_error_code(code),
            seqno=seqno or None,
        ))
    return results


def to_outcome(recipient: Recipient, result: GatewayResult) -> DispatchOutcome:
    if result.success:
        return DispatchOutcome(phone=recipient.phone, success=True, guid=result.guid, seqno=result.seqno)
    return DispatchOutcome(
        phone=recipient.phone,
        success=False,
        seqno=result.seqno,
        error_code=result.error_code,
        error=result.error_message,
    )


def failed_outcomes(recipients: Sequence[Recipient], error: str) -> List[DispatchOutcome]:
    """Mark every recipient as failed with the same error text."""
    return [DispatchOutcome(phone=r.phone, success=False, error=error) for r in recipients]


def reconcile(recipients: Sequence[Recipient], results: Sequence[GatewayResult]) -> List[DispatchOutcome]:
    """
    Pair results with recipients by position.

    If the gateway returned fewer results than recipients, the first result
    stands in for the missing tail. That is a best-effort guess, so it is
    logged rather than passed over silently.
    """
    if not results:
        return failed_outcomes(recipients, "Empty gateway response")

    if len(results) < len(recipients):
        logger.warning(
            f"Gateway returned {len(results)} results for {len(recipients)} recipients; "
            f"reusing the first result for the remaining {len(recipients) - len(results)}"
        )

    return [
        to_outcome(recipient, results[index] if index < len(results) else results[0])
        for index, recipient in enumerate(recipients)
    ]
