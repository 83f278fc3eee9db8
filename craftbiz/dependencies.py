"""
Request dependencies.

Routers never reach for globals directly; they ask for the store registry
and the sharing collaborators through these providers, and tests swap them
out with app.dependency_overrides.
"""

import threading
from typing import Optional

from .config import settings
from .database import SessionLocal
from .pricing_engine import PricingEngine
from .sharing import FpdfDocumentRenderer, LoggingShareSink, UnavailableFileShareSink
from .storage import SqlKeyValueStore
from .stores import StoreRegistry

_lock = threading.Lock()
_stores: Optional[StoreRegistry] = None

_pricing_engine = PricingEngine()
_share_sink = LoggingShareSink()
_file_share_sink = UnavailableFileShareSink()


def get_stores() -> StoreRegistry:
    global _stores
    with _lock:
        if _stores is None or _stores.closed:
            _stores = StoreRegistry(SqlKeyValueStore(SessionLocal))
        return _stores


def get_pricing_engine() -> PricingEngine:
    return _pricing_engine


def get_share_sink():
    return _share_sink


def get_document_renderer():
    return FpdfDocumentRenderer(settings.EXPORT_DIR, shop_name=settings.SHOP_NAME)


def get_file_share_sink():
    return _file_share_sink


def close_stores() -> None:
    """Close the default registry, if one was created. The next get_stores() starts fresh."""
    global _stores
    with _lock:
        registry, _stores = _stores, None
    if registry is not None and not registry.closed:
        registry.close()
