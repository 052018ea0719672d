import base64
import binascii
import io

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from solsign.pdf.exceptions import InvalidDataUrlError, QrCodeError

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"


def generate_qr_png(payload: str, size: int = 150) -> bytes:
    """Render ``payload`` as a square PNG QR code of roughly ``size`` pixels."""
    if not payload:
        raise QrCodeError("QR payload is empty")
    try:
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=4,
            border=1,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        img = img.resize((size * 2, size * 2), Image.Resampling.NEAREST)
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()
    except (ValueError, OSError, DataOverflowError) as exc:
        raise QrCodeError(f"QR generation failed: {exc}") from exc


def decode_data_url(data_url: str | None) -> bytes:
    """Decode a ``data:<mime>;base64,<payload>`` URL into raw bytes.

    Raises:
        InvalidDataUrlError: if the string is not a base64 data URL.
    """
    if not data_url or "," not in data_url:
        raise InvalidDataUrlError("Not a data URL")
    header, b64 = data_url.split(",", 1)
    if not header.startswith("data:") or ";base64" not in header:
        raise InvalidDataUrlError("Only base64 data URLs are supported")
    try:
        return base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidDataUrlError(f"Invalid base64 payload: {exc}") from exc


def is_supported_image(data: bytes) -> bool:
    """True for PNG or JPEG bytes."""
    return data.startswith(PNG_MAGIC) or data.startswith(JPEG_MAGIC)
