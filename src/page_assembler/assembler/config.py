"""
Module: assembler.config

Purpose:
    Configuration dataclass for the assembly pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - AssemblyConfig: Settings for decoding, import limits and export

Dependencies:
    - dataclasses (std)

Used By:
    - assembler.decoding.decoder: Preview scale and JPEG quality
    - assembler.importing.coordinator: Batch size limit
    - assembler.output.exporter: Output naming and manifest
    - assembler.workspace: Passes config to every stage
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AssemblyConfig:
    """
    Configuration for assembling documents (immutable).

    Attributes:
        preview_scale: Render scale for page previews (1.0 = 72 DPI)
        preview_quality: JPEG quality when encoding previews (1-95)
        default_output_name: Output name when the caller gives none
        output_extension: Extension appended to output names
        max_batch_sources: Largest number of assets accepted in one import
        write_manifest: Write a JSON manifest next to the exported PDF
        overwrite: Replace an existing output file instead of picking
            a "name (n).pdf" sibling

    Example:
        >>> config = AssemblyConfig(preview_scale=0.25)
        >>> config.default_output_name
        'master_document'
    """

    # Decoding
    preview_scale: float = 0.5
    preview_quality: int = 70

    # Import
    max_batch_sources: int = 100

    # Output
    default_output_name: str = "master_document"
    output_extension: str = ".pdf"
    write_manifest: bool = False
    overwrite: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.preview_scale <= 0:
            raise ValueError(f"preview_scale must be positive: {self.preview_scale}")
        if not 1 <= self.preview_quality <= 95:
            raise ValueError(f"preview_quality must be in 1-95: {self.preview_quality}")
        if self.max_batch_sources <= 0:
            raise ValueError(f"max_batch_sources must be positive: {self.max_batch_sources}")
        if not self.default_output_name.strip():
            raise ValueError("default_output_name must not be empty")
        if not self.output_extension.startswith("."):
            raise ValueError(f"output_extension must start with '.': {self.output_extension!r}")
