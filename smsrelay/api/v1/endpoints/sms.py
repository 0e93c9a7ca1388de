"""
API endpoints for sending SMS through the gateway.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from smsrelay.api.v1.dependencies import get_session_manager, get_sms_sender, verify_api_key
from smsrelay.schemas.sms import (
    BulkSendRequest,
    BulkSendResponse,
    RecipientIn,
    SingleSendRequest,
    TokenStatusResponse,
)
from smsrelay.services.sms.recipients import Recipient

router = APIRouter(dependencies=[Depends(verify_api_key)])
logger = logging.getLogger("smsrelay.endpoint")


def _to_recipients(items: List[RecipientIn]) -> List[Recipient]:
    return [
        Recipient(phone=item.phone or "", message=item.message, template_vars=item.template_vars or [])
        for item in items
    ]


@router.post("/send", response_model=BulkSendResponse, response_model_exclude_none=True)
async def send_bulk_sms(
    payload: BulkSendRequest,
    sms_sender = Depends(get_sms_sender),
):
    """
    Send SMS to one or more recipients.

    - **recipients**: list of `{phone, message?, templateVars?}`
    - **template**: optional text with `{#var#}` placeholders, filled per recipient
    - **templateid**: DLT template id

    Always answers 200 once dispatch starts; per-recipient failures are in `results`.
    """
    return await sms_sender.send_bulk(
        recipients=_to_recipients(payload.recipients or []),
        template=payload.template,
        template_id=payload.templateid,
    )


@router.post("/send-single", response_model=BulkSendResponse, response_model_exclude_none=True)
async def send_single_sms(
    payload: SingleSendRequest,
    sms_sender = Depends(get_sms_sender),
):
    """
    Send one SMS.

    - **phone**: 10-digit Indian mobile number
    - **message**: message text
    """
    return await sms_sender.send_single(phone=payload.phone, message=payload.message)


@router.get("/token-status", response_model=TokenStatusResponse)
async def get_token_status(
    session_manager = Depends(get_session_manager),
):
    """Check whether the cached gateway token is still valid."""
    return session_manager.status()
