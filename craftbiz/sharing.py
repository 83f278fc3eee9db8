"""
Sharing and document-export collaborators.

The offer flow only talks to these protocols:
- ShareSink.share(text): hand plain text to whatever sends it on
- DocumentRenderer.render(document): turn a QuoteDocument into a file
- FileShareSink.share_file(path, mime_type, uti): hand a file on

Failures are raised, never swallowed here; the routers turn them into
user-facing notices.
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional, Protocol

from .pdf_generator import generate_quote_pdf
from .quote_renderer import QuoteDocument

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
PDF_UTI = "com.adobe.pdf"


class ShareSink(Protocol):
    def share(self, text: str) -> None: ...


class DocumentRenderer(Protocol):
    def render(self, document: QuoteDocument) -> Path: ...


class FileShareSink(Protocol):
    def is_available(self) -> bool: ...

    def share_file(self, path: Path, mime_type: str, uti: Optional[str] = None) -> None: ...


class LoggingShareSink:
    """
    Stands in for a platform share sheet when running as a service.
    Logs each share and keeps nothing.
    """

    def share(self, text: str) -> None:
        logger.info("Shared %d characters", len(text))


class UnavailableFileShareSink:
    """No file share target; callers fall back to showing the file path."""

    def is_available(self) -> bool:
        return False

    def share_file(self, path: Path, mime_type: str, uti: Optional[str] = None) -> None:
        raise RuntimeError("File sharing is not available on this device")


def slugify(name: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", name).strip("-")
    return slug[:40] or "offer"


class FpdfDocumentRenderer:
    """Writes offers as PDF files under export_dir."""

    def __init__(self, export_dir, shop_name: Optional[str] = None):
        self.export_dir = Path(export_dir)
        self.shop_name = shop_name or ""

    def render(self, document: QuoteDocument) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        path = self.export_dir / f"Offer-{slugify(document.name)}-{int(time.time() * 1000)}.pdf"
        path.write_bytes(generate_quote_pdf(document, shop_name=self.shop_name))
        logger.info("Generated offer PDF at %s", path)
        return path
