from __future__ import annotations

from typing import Optional

from ..core.enums import ClockAction
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def require_clock_action(value) -> ClockAction:
    if isinstance(value, ClockAction):
        return value
    try:
        return ClockAction(value)
    except ValueError:
        raise ValidationError(f"Unknown clock action: {value!r}") from None


def require_otp_code(value: Optional[str], length: int) -> str:
    code = str(value).strip() if value is not None else ""
    if len(code) != length or not code.isdigit():
        raise ValidationError("Please enter a valid OTP")
    return code
