from __future__ import annotations

import io

import qrcode
from services.api.app.services.render_base import RenderError


class QrCodeRenderer:
    def __init__(self, *, box_size: int = 10, border: int = 4) -> None:
        self._box_size = box_size
        self._border = border

    def render_png(self, payload: str) -> bytes:
        if not payload:
            raise RenderError("Cannot render an empty QR payload")

        try:
            qr = qrcode.QRCode(
                version=None,
                error_correction=qrcode.constants.ERROR_CORRECT_M,
                box_size=self._box_size,
                border=self._border,
            )
            qr.add_data(payload)
            qr.make(fit=True)

            img = qr.make_image(fill_color="black", back_color="white")
            buffer = io.BytesIO()
            img.save(buffer, format="PNG")
        except Exception as e:
            raise RenderError(f"QR rendering failed: {e}") from e

        return buffer.getvalue()
