"""QR code rendering for provisioning URIs."""

from __future__ import annotations

import base64
import io
import logging

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_L
from qrcode.image.pil import PilImage

logger = logging.getLogger(__name__)

QR_IMAGE_SIZE: int = 250


class QRGenerationFailed(RuntimeError):
    """Raised when a provisioning URI cannot be rendered as a QR image."""


def render_qr_png(uri: str, size: int = QR_IMAGE_SIZE) -> bytes:
    """Encode ``uri`` as a ``size`` x ``size`` PNG and return the file bytes."""

    try:
        qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_L, box_size=1, border=4)
        qr.add_data(uri)
        qr.make(fit=True)
        image = qr.make_image(image_factory=PilImage, fill_color="black", back_color="white").get_image()
        image = image.convert("L").resize((size, size), Image.Resampling.NEAREST)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except Exception as exc:  # qrcode and Pillow raise a mix of error types
        raise QRGenerationFailed(f"Could not render QR code: {exc}") from exc
    logger.debug("Rendered %dx%d QR code for a %d character URI", size, size, len(uri))
    return buffer.getvalue()


def qr_code_base64(uri: str, size: int = QR_IMAGE_SIZE) -> str:
    """Return the QR PNG for ``uri`` as standard base64 text."""

    return base64.b64encode(render_qr_png(uri, size)).decode("ascii")
