"""Tests for QR code rendering."""

import base64
import io

from totp_auth.qr import print_qr_ascii, qr_data_uri, qr_img_tag, qr_png


URI = (
    "otpauth://totp/test-app%40example.com?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
    "&issuer=TEST%20APP&algorithm=SHA1&digits=6&period=30"
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_qr_png_is_png():
    """Test that the rendered image is a PNG."""
    assert qr_png(URI).startswith(PNG_SIGNATURE)


def test_qr_data_uri():
    """Test that the data URI wraps the PNG in base64."""
    data_uri = qr_data_uri(URI)
    prefix = "data:image/png;base64,"

    assert data_uri.startswith(prefix)
    assert base64.b64decode(data_uri[len(prefix):]).startswith(PNG_SIGNATURE)


def test_qr_img_tag():
    """Test the HTML embedding of the QR code."""
    tag = qr_img_tag(URI)
    assert tag.startswith('<img src="data:image/png;base64,')
    assert tag.endswith('"/>')


def test_print_qr_ascii():
    """Test that the terminal rendering writes several lines of output."""
    out = io.StringIO()
    print_qr_ascii(URI, out=out)
    assert len(out.getvalue().splitlines()) > 10
