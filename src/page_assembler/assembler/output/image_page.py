"""
Module: assembler.output.image_page

Purpose:
    Render a standalone image as a single PDF page using ReportLab.
    The page takes the image's native pixel size as points and the
    image fills it; rotation is applied as a canvas transform.

Key Functions:
    - render_image_page(): One-page PDF bytes for an image

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - assembler.output.exporter: Image nodes
"""

from __future__ import annotations

import io
from typing import Tuple

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

# Modes ReportLab can take through a PNG round trip
_PNG_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}


def image_page_size(width: int, height: int, rotation: int) -> Tuple[float, float]:
    """
    Page size in points for an image at a rotation.

    Width and height swap for quarter turns so the rotated image still
    fills the page.

    Example:
        >>> image_page_size(400, 300, 90)
        (300.0, 400.0)
    """
    if rotation % 180 == 90:
        return float(height), float(width)
    return float(width), float(height)


def render_image_page(image: Image.Image, rotation: int = 0) -> bytes:
    """
    Render an image onto a new single-page PDF.

    Args:
        image: Decoded source image
        rotation: Clockwise rotation in degrees (0/90/180/270)

    Returns:
        PDF bytes with exactly one page

    Example:
        >>> pdf = render_image_page(Image.new("RGB", (200, 100)), 90)
        >>> pdf[:5]
        b'%PDF-'
    """
    width, height = image.size
    page_width, page_height = image_page_size(width, height, rotation)

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(page_width, page_height))
    c.saveState()
    # Rotate about the page centre; ReportLab angles are counter-clockwise
    c.translate(page_width / 2, page_height / 2)
    c.rotate(-rotation)
    c.drawImage(
        _pil_to_reader(image),
        -width / 2,
        -height / 2,
        width=width,
        height=height,
        mask="auto",
    )
    c.restoreState()
    c.showPage()
    c.save()
    return buf.getvalue()


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    if img.mode not in _PNG_MODES:
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)
