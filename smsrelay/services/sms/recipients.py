"""
Recipient validation, message templating and grouping into gateway batches.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from smsrelay.core.exceptions import ValidationError
from smsrelay.utils.phone import validate_phone

TEMPLATE_PLACEHOLDER = "{#var#}"

_PLACEHOLDER_RE = re.compile(re.escape(TEMPLATE_PLACEHOLDER))


@dataclass
class Recipient:
    phone: str
    message: Optional[str] = None
    template_vars: List[Any] = field(default_factory=list)


@dataclass
class Batch:
    """One gateway call's worth of recipients sharing the same text."""
    message_text: str
    recipients: List[Recipient]


def apply_template(template: str, values: Sequence[Any]) -> str:
    """
    Replace {#var#} placeholders in template with provided values.

    Placeholders are filled left to right. Missing values become an empty
    string; extra values are ignored.

    Args:
        template: Template text
        values: Substitution values, in placeholder order

    Returns:
        str: The resolved message
    """
    remaining = iter(values or [])

    def _next_value(_match: re.Match) -> str:
        value = next(remaining, None)
        return "" if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_next_value, template)


def resolve_message(recipient: Recipient, template: Optional[str]) -> str:
    """Literal message wins; otherwise the template is filled from the recipient's values."""
    if recipient.message:
        return recipient.message
    if template:
        return apply_template(template, recipient.template_vars)
    return ""


def validate_submission(
    recipients: Sequence[Recipient],
    template: Optional[str],
    max_recipients: int
) -> None:
    """
    Reject a submission as a whole before anything is sent.

    Raises:
        ValidationError: If the list is empty or too long, a phone number is
            missing or invalid, or a recipient has no message source
    """
    if not recipients:
        raise ValidationError(message="recipients must be a non-empty array")

    if len(recipients) > max_recipients:
        raise ValidationError(
            message=f"Maximum {max_recipients} recipients per request",
            details={"count": len(recipients), "limit": max_recipients}
        )

    for index, recipient in enumerate(recipients):
        is_valid, _, error = validate_phone(recipient.phone)
        if not is_valid:
            raise ValidationError(
                message=f"Invalid phone number: {recipient.phone or 'missing'}",
                details={"index": index, "reason": error}
            )

        if not recipient.message and not template:
            raise ValidationError(
                message="Each recipient must have a message, or provide a template",
                details={"index": index}
            )


def group_by_message(
    recipients: Sequence[Recipient],
    template: Optional[str]
) -> Dict[str, List[Recipient]]:
    """
    Group recipients by their resolved message text.

    Groups are ordered by first occurrence, and recipients keep their
    submission order within a group.
    """
    groups: Dict[str, List[Recipient]] = {}
    for recipient in recipients:
        groups.setdefault(resolve_message(recipient, template), []).append(recipient)
    return groups


def split_into_batches(groups: Dict[str, List[Recipient]], cap: int) -> List[Batch]:
    """Split every group into consecutive chunks of at most `cap` recipients."""
    if cap < 1:
        raise ValueError("cap must be positive")

    batches = []
    for message_text, group in groups.items():
        for start in range(0, len(group), cap):
            batches.append(Batch(message_text=message_text, recipients=group[start:start + cap]))
    return batches


def build_batches(
    recipients: Sequence[Recipient],
    template: Optional[str],
    cap: int
) -> List[Batch]:
    return split_into_batches(group_by_message(recipients, template), cap)
