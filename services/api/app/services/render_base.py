from __future__ import annotations

from typing import Protocol


class RenderError(Exception):
    """QR image rendering or share delivery failed.

    Never fatal: the order already exists and sharing falls back to text only.
    """


class QrRenderer(Protocol):
    def render_png(self, payload: str) -> bytes: ...


class ShareSink(Protocol):
    def share(self, *, order_code: str, text: str, image_png: bytes | None) -> None: ...
