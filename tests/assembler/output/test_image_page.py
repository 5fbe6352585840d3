"""
Unit tests for ReportLab image pages.
"""

from unittest.mock import patch

import fitz
import pytest
from PIL import Image

from page_assembler.assembler.output.image_page import image_page_size, render_image_page


@pytest.mark.parametrize(
    "rotation, expected",
    [(0, (400.0, 300.0)), (90, (300.0, 400.0)), (180, (400.0, 300.0)), (270, (300.0, 400.0))],
)
def test_image_page_size_when_rotated_then_swaps_on_quarter_turns(rotation, expected):
    assert image_page_size(400, 300, rotation) == expected


def test_render_when_unrotated_then_single_page_at_native_size():
    pdf = render_image_page(Image.new("RGB", (200, 100), "blue"))

    doc = fitz.open(stream=pdf, filetype="pdf")
    try:
        assert doc.page_count == 1
        assert (doc[0].rect.width, doc[0].rect.height) == (200, 100)
        assert len(doc[0].get_images()) == 1
    finally:
        doc.close()


def test_render_when_rotated_then_page_dimensions_swapped():
    pdf = render_image_page(Image.new("RGB", (200, 100)), rotation=90)

    doc = fitz.open(stream=pdf, filetype="pdf")
    try:
        assert (doc[0].rect.width, doc[0].rect.height) == (100, 200)
    finally:
        doc.close()


def test_render_when_cmyk_then_converted_before_drawing():
    pdf = render_image_page(Image.new("CMYK", (20, 20)))
    assert pdf.startswith(b"%PDF-")


@patch("reportlab.pdfgen.canvas.Canvas")
def test_render_when_rotated_then_canvas_rotated_clockwise(mock_canvas_cls):
    # Arrange
    mock_canvas = mock_canvas_cls.return_value

    # Act
    render_image_page(Image.new("RGB", (40, 20)), rotation=270)

    # Assert
    mock_canvas.translate.assert_called_once_with(10.0, 20.0)
    mock_canvas.rotate.assert_called_once_with(-270)
    assert mock_canvas.drawImage.call_count == 1
