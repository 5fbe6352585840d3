"""
Module: assembler.selection

Purpose:
    Selection semantics (click, shift-click, range, all/none) over the
    NodeStore order.
"""

from .engine import SelectionEngine

__all__ = ["SelectionEngine"]
