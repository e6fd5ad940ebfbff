"""QR code rendering for enrollment URIs."""

import base64
import io
import sys
from typing import Optional, TextIO

import qrcode


def _make_qr(data: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def qr_png(uri: str) -> bytes:
    """Render the URI as a PNG image and return its bytes."""
    img = _make_qr(uri).make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue()


def qr_data_uri(uri: str) -> str:
    """Return the QR image as a ``data:image/png;base64,...`` URI."""
    encoded = base64.b64encode(qr_png(uri)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def qr_img_tag(uri: str) -> str:
    """Return an HTML ``<img>`` tag embedding the QR image."""
    return f'<img src="{qr_data_uri(uri)}"/>'


def print_qr_ascii(uri: str, out: Optional[TextIO] = None) -> None:
    """Draw the QR code on a text stream using block characters."""
    _make_qr(uri).print_ascii(out=out or sys.stdout)
