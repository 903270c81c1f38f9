import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture()
def png_bytes() -> bytes:
    """Bytes that look like a PNG; OCR is always mocked so content is opaque."""
    return PNG_SIGNATURE + b"batch-record-scan"


@pytest.fixture()
def spec_pdf_bytes() -> bytes:
    """Generate a single-page PDF specification document."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Product specification: Saline Solution 0.9%")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def fenced_reply() -> str:
    return (
        "Here is the data:\n"
        "```json\n"
        '[{"batch": "42", "product": "Saline"},'
        ' {"Sodium Chloride": "9.0 g"},'
        ' {"target pH": 7.0}]\n'
        "```"
    )
