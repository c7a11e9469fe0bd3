"""
Cart store - process-wide shopping cart shared by every request.

The store lives on the Flask app (``app.extensions['cart_store']``) and is
handed to the checkout explicitly, so tests can build their own instance.
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, asdict
from typing import List, Optional

from flask import Flask, current_app

from bellavibe.exceptions import ProductNotFoundError
from bellavibe.models import Product

logger = logging.getLogger(__name__)


@dataclass
class LineItem:
    """Requested quantity of a product."""
    product_id: int
    quantity: int

    def to_dict(self):
        return asdict(self)


class ReadWriteLock:
    """Many readers or one writer; waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class CartStore:
    """
    In-memory cart holding at most one line item per product.

    ``add`` and ``drain_all`` take the exclusive lock, ``view`` the shared one.
    """

    def __init__(self, app: Optional[Flask] = None):
        self._items: List[LineItem] = []
        self._lock = ReadWriteLock()

        if app:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.extensions['cart_store'] = self

    def add(self, product_id: int, quantity: int) -> LineItem:
        """Merge ``quantity`` into the existing line or append a new one."""
        with self._lock.write():
            for item in self._items:
                if item.product_id == product_id:
                    item.quantity += quantity
                    return LineItem(item.product_id, item.quantity)
            item = LineItem(product_id, quantity)
            self._items.append(item)
            return LineItem(item.product_id, item.quantity)

    def view(self) -> List[LineItem]:
        """Snapshot of the current items."""
        with self._lock.read():
            return [LineItem(i.product_id, i.quantity) for i in self._items]

    def drain_all(self) -> List[LineItem]:
        """Remove and return every item, leaving the cart empty."""
        with self._lock.write():
            items, self._items = self._items, []
            return items

    def clear(self) -> None:
        with self._lock.write():
            self._items = []

    def __len__(self):
        with self._lock.read():
            return len(self._items)


def get_cart_store() -> CartStore:
    """Get the cart store bound to the current app."""
    return current_app.extensions['cart_store']


def add_to_cart(store: CartStore, session, product_id: int, quantity: int) -> LineItem:
    """
    Add a product to the cart after checking it exists.

    Raises:
        ProductNotFoundError: product is not in the catalog; cart unchanged.
    """
    exists = session.query(Product.id).filter(Product.id == product_id).first()
    if exists is None:
        logger.info(f"[cart] Rejected add for unknown product_id={product_id}")
        raise ProductNotFoundError(product_id)

    item = store.add(product_id, quantity)
    logger.debug(f"[cart] product_id={product_id} now has quantity={item.quantity}")
    return item
