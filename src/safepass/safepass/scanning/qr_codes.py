from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
from PIL import Image

from ..core.exceptions import ValidationError


def make_badge_png(student_id: str) -> bytes:
    """PNG QR badge encoding a student id."""

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(student_id)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_badge(stream: BinaryIO) -> str:
    """Return the student id read from an uploaded badge photo."""

    try:
        img = Image.open(stream).convert("RGB")
    except OSError as e:
        raise ValidationError("Uploaded file is not an image") from e

    # pyzbar loads the zbar shared library on import
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code found in the image")
    return decoded[0].data.decode("utf-8").strip()
