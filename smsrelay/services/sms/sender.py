"""
SMS sender service: batches recipients and dispatches them through the Pragati gateway.
"""
import logging
from typing import List, Optional, Sequence

from smsrelay.core.exceptions import ConfigurationError, GatewaySessionError, ValidationError
from smsrelay.schemas.sms import BulkSendResponse, DispatchOutcome
from smsrelay.services.gateway.client import PragatiClient
from smsrelay.services.gateway.session import SessionManager
from smsrelay.services.sms.pacing import BatchPacer
from smsrelay.services.sms.reconciler import failed_outcomes, parse_gateway_response, reconcile
from smsrelay.services.sms.recipients import Batch, Recipient, build_batches, validate_submission
from smsrelay.utils.ids import IDPrefix, generate_prefixed_id
from smsrelay.utils.phone import format_phone, is_valid_phone


logger = logging.getLogger("smsrelay.sms")


class SMSSender:
    """
    Service for sending bulk SMS through the Pragati gateway.
    """

    def __init__(
        self,
        client: PragatiClient,
        session_manager: SessionManager,
        *,
        sender_id: Optional[str],
        default_template_id: Optional[str] = None,
        category: str = "bulk",
        recipient_cap: int = 100,
        max_recipients: int = 1000,
        batch_delay: float = 0.5
    ):
        """
        Initialize SMS sender service.

        Args:
            client: Gateway client
            session_manager: Supplies the session token for each bulk send
            sender_id: Registered sender id
            default_template_id: DLT template id used when a request has none
            category: Gateway delivery category
            recipient_cap: Maximum recipients per gateway call
            max_recipients: Maximum recipients per bulk request
            batch_delay: Seconds between successive gateway calls
        """
        self.client = client
        self.session_manager = session_manager
        self.sender_id = sender_id
        self.default_template_id = default_template_id
        self.category = category
        self.recipient_cap = recipient_cap
        self.max_recipients = max_recipients
        self.batch_delay = batch_delay

    async def send_bulk(
        self,
        *,
        recipients: Sequence[Recipient],
        template: Optional[str] = None,
        template_id: Optional[str] = None
    ) -> BulkSendResponse:
        """
        Send SMS to many recipients, grouping identical texts into batches.

        Args:
            recipients: Recipients with a literal message or template values
            template: Optional template with {#var#} placeholders
            template_id: DLT template id (falls back to the configured default)

        Returns:
            BulkSendResponse: Summary and one outcome per recipient

        Raises:
            ValidationError: If the submission is rejected before sending
            ConfigurationError: If the gateway is not fully configured
        """
        request_id = generate_prefixed_id(IDPrefix.REQUEST)
        logger.info(f"[{request_id}] === NEW REQUEST ===")

        validate_submission(recipients, template, self.max_recipients)

        template_id = template_id or self.default_template_id
        self._check_configuration(template_id)

        batches = build_batches(recipients, template, self.recipient_cap)

        # One token for the whole run; it is not expected to expire mid-run
        try:
            credential = await self.session_manager.acquire_valid_credential()
        except GatewaySessionError as e:
            logger.error(f"[{request_id}] Could not obtain gateway token: {e.message}")
            return BulkSendResponse.from_outcomes(failed_outcomes(recipients, e.message))

        logger.info(f"[{request_id}] Processing {len(recipients)} recipients in {len(batches)} batches")

        outcomes: List[DispatchOutcome] = []
        pacer = BatchPacer(self.batch_delay)
        for batch_index, batch in enumerate(batches, start=1):
            await pacer.wait()
            logger.info(
                f"[{request_id}] Batch {batch_index}/{len(batches)}: "
                f"Sending to {len(batch.recipients)} recipients"
            )
            try:
                outcomes.extend(await self._send_batch(
                    batch=batch,
                    token=credential.token,
                    template_id=template_id,
                    request_id=request_id
                ))
            finally:
                pacer.mark()

        response = BulkSendResponse.from_outcomes(outcomes)
        logger.info(f"[{request_id}] {response.message}")
        return response

    async def send_single(self, *, phone: Optional[str], message: Optional[str]) -> BulkSendResponse:
        """
        Send one SMS; a convenience wrapper around `send_bulk`.

        Raises:
            ValidationError: If phone or message is missing, or the phone is invalid
        """
        if not phone or not message:
            raise ValidationError(message="phone and message are required")

        if not is_valid_phone(phone):
            raise ValidationError(message="Phone number must be a valid 10-digit Indian mobile number")

        return await self.send_bulk(recipients=[Recipient(phone=phone, message=message)])

    def _check_configuration(self, template_id: Optional[str]) -> None:
        missing = []
        if not self.client.base_url:
            missing.append("PRAGATI_API_BASE_URL")
        if not self.sender_id:
            missing.append("SMS_SENDER_ID")
        if not template_id:
            missing.append("templateid")

        if missing:
            raise ConfigurationError(details={"missing": missing})

    async def _send_batch(
        self,
        *,
        batch: Batch,
        token: str,
        template_id: str,
        request_id: str
    ) -> List[DispatchOutcome]:
        """
        Send one batch and turn the gateway reply into per-recipient outcomes.

        Never raises: transport errors and HTTP failures become failed
        outcomes for every recipient in the batch.
        """
        try:
            response = await self.client.send_sms(
                token=token,
                phone_numbers=[format_phone(r.phone) for r in batch.recipients],
                sender_id=self.sender_id,
                message_text=batch.message_text,
                category=self.category,
                template_id=template_id
            )

            if not response.is_success:
                logger.error(f"[{request_id}] HTTP Error: {response.status_code}")
                return failed_outcomes(batch.recipients, f"HTTP {response.status_code}: {response.text}")

            outcomes = reconcile(batch.recipients, parse_gateway_response(response.text))
        except Exception as e:
            logger.error(f"[{request_id}] Send error: {type(e).__name__}: {e}")
            return failed_outcomes(batch.recipients, str(e) or type(e).__name__)

        successful = sum(1 for outcome in outcomes if outcome.success)
        failed = len(outcomes) - successful
        summary = response.text.split("&seqno=")[0].strip()
        if failed:
            logger.info(
                f"[{request_id}] Partial success: {successful} sent, {failed} failed | Response: {summary}"
            )
            for outcome in outcomes:
                if not outcome.success:
                    logger.error(f"[{request_id}] Error for {outcome.phone}: [{outcome.error_code}] {outcome.error}")
        else:
            logger.info(f"[{request_id}] All {successful} SMS sent successfully | Response: {summary}")

        return outcomes
