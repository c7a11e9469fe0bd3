"""
Inventory ledger access for the sale transaction.

Every function here runs inside the caller's transaction and never commits.
"""
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from bellavibe.exceptions import ProductLookupError, StockUpdateError
from bellavibe.models import Product


def lock_product(session, product_id: int) -> Optional[Product]:
    """
    Fetch a product row FOR UPDATE, holding the lock until commit/rollback.

    Returns None if the product does not exist. Database errors other than
    timeouts are raised as ProductLookupError.
    """
    try:
        return (
            session.query(Product)
            .filter(Product.id == product_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
    except SQLAlchemyError as e:
        if is_timeout_error(e):
            raise
        raise ProductLookupError(product_id) from e


def decrement_stock(session, product: Product, quantity: int) -> int:
    """Write ``stock - quantity`` for a locked product and return the new level."""
    new_stock = product.stock - quantity
    try:
        product.stock = new_stock
        session.flush()
    except SQLAlchemyError as e:
        if is_timeout_error(e):
            raise
        raise StockUpdateError(product.id) from e
    return new_stock


# PostgreSQL query_canceled / lock_not_available
_TIMEOUT_PGCODES = ('57014', '55P03')


def is_timeout_error(error: SQLAlchemyError) -> bool:
    """True when the database aborted a statement on statement/lock timeout."""
    orig = getattr(error, 'orig', None)
    pgcode = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
    return pgcode in _TIMEOUT_PGCODES
