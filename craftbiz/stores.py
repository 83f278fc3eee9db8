"""
Collection stores.

Each collection lives in memory, owned by one CollectionStore, and is
mirrored to a KeyValueStore under its own key:

    {namespace}/recipes   list of Recipe
    {namespace}/orders    list of Order
    {namespace}/replies   list of Reply

Loading happens once. A missing or unreadable stored copy falls back to the
collection's defaults and is never fatal.

Every mutation snapshots the whole list and hands it to the key's
WriteQueue. Writes for one key run one at a time in submission order, so
the last mutation always wins; there is no merging. A failed write is
logged and dropped: no retry, no error for the caller.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from . import seeds
from .config import settings
from .schemas import Order, Recipe, Reply
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class WriteQueue:
    """Serialized background writer for a single storage key."""

    def __init__(self, kv: KeyValueStore, key: str):
        self.kv = kv
        self.key = key
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"write:{key}")
        self._lock = threading.Lock()
        self._pending: List[Future] = []

    def submit(self, text: str) -> Future:
        """Queue a write of text. The future resolves to True/False, never raises."""
        with self._lock:
            future = self._executor.submit(self._write, text)
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        return future

    def _write(self, text: str) -> bool:
        try:
            ok = bool(self.kv.set(self.key, text))
        except Exception as e:
            logger.warning("Write-back of %s failed: %s", self.key, e)
            return False
        if not ok:
            logger.warning("Write-back of %s was rejected by the store", self.key)
        return ok

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every write queued so far has finished."""
        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)


class CollectionStore(Generic[T]):
    """Insertion-ordered list of records mirrored to one storage key."""

    def __init__(self, key: str, model: Type[T], kv: KeyValueStore,
                 defaults: Callable[[], List[T]]):
        self.key = key
        self.kv = kv
        self.defaults = defaults
        self.writer = WriteQueue(kv, key)
        self._adapter = TypeAdapter(List[model])
        self._items: List[T] = []
        self._loaded = False
        self._lock = threading.RLock()

    def load(self) -> List[T]:
        """Read the stored copy once; anything unusable means defaults."""
        with self._lock:
            raw = None
            try:
                raw = self.kv.get(self.key)
            except Exception as e:
                logger.warning("Could not read %s, using defaults: %s", self.key, e)

            items = None
            if raw:
                try:
                    items = self._adapter.validate_json(raw)
                except ValidationError as e:
                    logger.warning("Stored %s is unreadable, using defaults: %s", self.key, e)

            self._items = list(items) if items is not None else list(self.defaults())
            self._loaded = True
            return list(self._items)

    def _ensure_loaded(self):
        if not self._loaded:
            self.load()

    def all(self) -> List[T]:
        with self._lock:
            self._ensure_loaded()
            return list(self._items)

    def get(self, item_id: str) -> Optional[T]:
        with self._lock:
            self._ensure_loaded()
            for item in self._items:
                if item.id == item_id:
                    return item
            return None

    def mint_id(self, prefix: str = "") -> str:
        """Creation-timestamp id (epoch millis), bumped until unused here."""
        with self._lock:
            self._ensure_loaded()
            taken = {item.id for item in self._items}
            stamp = int(time.time() * 1000)
            while f"{prefix}{stamp}" in taken:
                stamp += 1
            return f"{prefix}{stamp}"

    def prepend(self, item: T) -> T:
        """New records go to the front, the way the list is displayed."""
        with self._lock:
            self._ensure_loaded()
            self._items.insert(0, item)
            self._persist()
            return item

    def add(self, build: Callable[[str], T], prefix: str = "") -> T:
        """Mint an id, build the record with it and put it first, under one lock hold."""
        with self._lock:
            return self.prepend(build(self.mint_id(prefix)))

    def replace(self, item: T) -> T:
        """Swap the whole record with the same id. Raises KeyError if absent."""
        with self._lock:
            self._ensure_loaded()
            for i, existing in enumerate(self._items):
                if existing.id == item.id:
                    self._items[i] = item
                    self._persist()
                    return item
            raise KeyError(item.id)

    def modify(self, item_id: str, change: Callable[[T], T]) -> Optional[T]:
        """Atomically replace a record with change(record). None if absent."""
        with self._lock:
            current = self.get(item_id)
            if current is None:
                return None
            return self.replace(change(current))

    def _persist(self) -> Future:
        text = self._adapter.dump_json(self._items, by_alias=True).decode("utf-8")
        return self.writer.submit(text)

    def flush(self, timeout: Optional[float] = None) -> None:
        self.writer.flush(timeout)

    def close(self) -> None:
        self.writer.close()


class StoreRegistry:
    """The three app collections over one KeyValueStore."""

    def __init__(self, kv: KeyValueStore, namespace: Optional[str] = None):
        ns = namespace or settings.STORAGE_NAMESPACE
        self.recipes: CollectionStore[Recipe] = CollectionStore(
            f"{ns}/recipes", Recipe, kv, seeds.default_recipes,
        )
        self.orders: CollectionStore[Order] = CollectionStore(
            f"{ns}/orders", Order, kv, seeds.seed_orders,
        )
        self.replies: CollectionStore[Reply] = CollectionStore(
            f"{ns}/replies", Reply, kv, seeds.default_replies,
        )
        self.closed = False

    def _stores(self):
        return (self.recipes, self.orders, self.replies)

    def load(self) -> None:
        for store in self._stores():
            store.load()

    def flush(self, timeout: Optional[float] = None) -> None:
        for store in self._stores():
            store.flush(timeout)

    def close(self) -> None:
        for store in self._stores():
            store.close()
        self.closed = True
