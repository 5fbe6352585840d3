"""
Unit tests for output naming helpers.
"""

from pathlib import Path

from page_assembler.common.path_utils import output_filename, unique_path


def test_output_filename_when_none_then_uses_default():
    assert output_filename(None, "master_document") == "master_document.pdf"


def test_output_filename_when_blank_then_uses_default():
    assert output_filename("   ", "master_document") == "master_document.pdf"


def test_output_filename_when_extension_present_then_not_duplicated():
    assert output_filename("merged.PDF", "x") == "merged.PDF"


def test_output_filename_when_unsafe_characters_then_replaced():
    assert output_filename('a/b:c*"d', "x") == "a_b_c_d.pdf"


def test_output_filename_when_only_unsafe_characters_then_uses_default():
    assert output_filename("...", "fallback") == "fallback.pdf"


def test_unique_path_when_missing_then_returns_same(tmp_path):
    path = tmp_path / "out.pdf"
    assert unique_path(path) == path


def test_unique_path_when_taken_then_appends_counter(tmp_path):
    (tmp_path / "out.pdf").write_bytes(b"x")
    (tmp_path / "out (1).pdf").write_bytes(b"x")

    assert unique_path(tmp_path / "out.pdf") == tmp_path / "out (2).pdf"
