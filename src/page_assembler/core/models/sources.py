"""
Module: sources

Purpose:
    Provides the SourceAsset dataclass - the raw bytes of one uploaded
    file together with its declared media type. The media type decides
    whether the asset is a paginated document, an image, or unsupported.

Key Functions:
    - SourceAsset.from_path(): Build an asset from a file on disk
    - SourceAsset.from_bytes(): Build an asset from in-memory bytes
    - SourceAsset.kind: Classification derived from media_type

Dependencies:
    - dataclasses (std)
    - mimetypes (std)
    - uuid (std)

Used By:
    - assembler.decoding: Decodes assets into pages
    - assembler.importing: Stages and filters assets
    - assembler.decoding.registry: Lookup table keyed by source_id
"""

from __future__ import annotations

import mimetypes
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

PDF_MEDIA_TYPE = "application/pdf"


class SourceKind(str, Enum):
    """Classification of a source asset by declared media type."""
    DOCUMENT = "document"        # Paginated document (PDF)
    IMAGE = "image"              # Standalone raster image
    UNSUPPORTED = "unsupported"  # Filtered out before decoding

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceAsset:
    """
    Uploaded source asset (immutable).

    Attributes:
        name: File name shown to the user
        media_type: Declared MIME type, e.g. "application/pdf", "image/png"
        data: Raw file bytes
        source_id: Opaque unique key used by nodes to reference this asset

    Example:
        >>> asset = SourceAsset.from_path(Path("report.pdf"))
        >>> asset.kind
        <SourceKind.DOCUMENT: 'document'>
    """
    name: str
    media_type: str
    data: bytes = field(repr=False)
    source_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def kind(self) -> SourceKind:
        """Classify the asset from its declared media type."""
        media_type = (self.media_type or "").lower()
        if media_type == PDF_MEDIA_TYPE:
            return SourceKind.DOCUMENT
        if media_type.startswith("image/"):
            return SourceKind.IMAGE
        return SourceKind.UNSUPPORTED

    @property
    def size(self) -> int:
        """Size of the raw data in bytes."""
        return len(self.data)

    @classmethod
    def from_bytes(
        cls,
        name: str,
        data: bytes,
        media_type: Optional[str] = None,
    ) -> SourceAsset:
        """
        Create an asset from in-memory bytes.

        Args:
            name: Display/file name
            data: Raw bytes
            media_type: Declared MIME type; guessed from the name if omitted

        Returns:
            New SourceAsset with a fresh source_id
        """
        if media_type is None:
            media_type = guess_media_type(name)
        return cls(name=name, media_type=media_type, data=data)

    @classmethod
    def from_path(cls, path: Path, media_type: Optional[str] = None) -> SourceAsset:
        """
        Read an asset from disk.

        Raises:
            FileNotFoundError: If path doesn't exist
        """
        path = Path(path)
        return cls.from_bytes(path.name, path.read_bytes(), media_type)


def guess_media_type(name: str) -> str:
    """
    Guess a MIME type from a file name.

    Returns "application/octet-stream" when the extension is unknown,
    which classifies as UNSUPPORTED.

    Example:
        >>> guess_media_type("scan.JPG")
        'image/jpeg'
    """
    media_type, _ = mimetypes.guess_type(name.lower())
    return media_type or "application/octet-stream"
