"""
Module: assembler.output

Purpose:
    Export pass: re-serializes the final node order as one PDF.

Key Classes:
    - AssemblyExporter: Compose and write the output
    - ExportResult: Output path, page count and manifest

Key Functions:
    - render_image_page(): One-page PDF for an image node
"""

from .exporter import AssemblyExporter, ExportResult, ExportProgressCallback
from .image_page import render_image_page, image_page_size

__all__ = [
    "AssemblyExporter",
    "ExportResult",
    "ExportProgressCallback",
    "render_image_page",
    "image_page_size",
]
