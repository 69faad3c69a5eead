from __future__ import annotations

import io
import json
from typing import Callable, Optional

import qrcode

from ..clock.capture import EventCapture
from ..clock.location import LocationProvider
from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_QR_EXPIRES_IN


class CheckinQrService:
    """Renders the rotating company check-in QR code."""

    def __init__(
        self,
        capture: EventCapture,
        *,
        company_id: str,
        expires_in: int = DEFAULT_QR_EXPIRES_IN,
        clock: Callable = now_utc,
    ):
        self._capture = capture
        self._company_id = company_id
        self._expires_in = int(expires_in)
        self._clock = clock

    def build_payload(self, *, use_location: bool = False, provider: Optional[LocationProvider] = None) -> dict:
        payload = {
            "companyId": self._company_id,
            "timestamp": int(self._clock().timestamp() * 1000),
            "expiresIn": self._expires_in,
        }
        if use_location:
            location = self._capture.locate(provider)
            if location is not None:
                payload["location"] = location.to_payload()
        return payload

    def render_png(self, payload: dict) -> bytes:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(json.dumps(payload, separators=(",", ":")))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
