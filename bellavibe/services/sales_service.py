"""
Sales service with transactional logic.
Turns the cart contents into committed stock decrements and a sale total.
"""
import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from bellavibe.exceptions import (
    ApiError, EmptyCartError, ProductNotFoundError, InsufficientStockError,
    TransactionStartError, TransactionCommitError, CheckoutTimeoutError
)
from bellavibe.services.cart_service import CartStore
from bellavibe.services.inventory_service import lock_product, decrement_stock, is_timeout_error

logger = logging.getLogger(__name__)

SALE_PROCESSED_MESSAGE = 'sale processed'


@dataclass
class SaleResult:
    """Outcome of a committed sale. Not persisted."""
    total_amount: Decimal
    message: str = SALE_PROCESSED_MESSAGE
    line_count: int = 0

    def to_dict(self):
        return {'total_amount': self.total_amount, 'message': self.message}


def confirm_sale(cart_store: CartStore, session_factory, timeout_ms: Optional[int] = None) -> SaleResult:
    """
    Confirm sale with full transactional processing.

    Drains the cart, then inside one transaction locks each product row
    (ordered by product_id), checks stock, accumulates the total and writes
    the decremented stock. Any failure rolls the whole transaction back; the
    drained items are not put back in the cart.

    Args:
        cart_store: Shared cart to drain
        session_factory: Callable returning a new SQLAlchemy session
        timeout_ms: Optional upper bound for the whole transaction

    Returns:
        SaleResult with the exact decimal total

    Raises:
        EmptyCartError: nothing to sell (no transaction opened)
        ProductNotFoundError, InsufficientStockError: caller errors, rolled back
        TransactionStartError, TransactionCommitError, StockUpdateError,
        ProductLookupError, CheckoutTimeoutError: infrastructure errors
    """
    items = cart_store.drain_all()
    if not items:
        raise EmptyCartError()

    deadline = time.monotonic() + timeout_ms / 1000.0 if timeout_ms else None
    session = session_factory()

    try:
        # 1. Open transaction
        try:
            session.begin()
            session.connection()
            _apply_database_timeouts(session, timeout_ms)
        except SQLAlchemyError as e:
            logger.error(f"[sale] Could not start transaction: {e}")
            _safe_rollback(session)
            raise TransactionStartError() from e

        # 2. Lock, validate and decrement each line
        total = Decimal('0.00')
        try:
            for item in sorted(items, key=lambda i: i.product_id):
                _check_deadline(deadline)

                product = lock_product(session, item.product_id)
                if product is None:
                    logger.warning(f"[sale] Product {item.product_id} not found during sale")
                    raise ProductNotFoundError(item.product_id)

                if product.stock < item.quantity:
                    logger.warning(
                        f"[sale] Insufficient stock for product {product.id} ('{product.name}'). "
                        f"Available: {product.stock}, Requested: {item.quantity}"
                    )
                    raise InsufficientStockError(product.id, product.stock, item.quantity, product.name)

                subtotal = Decimal(str(product.price)) * item.quantity
                total += subtotal

                decrement_stock(session, product, item.quantity)

            _check_deadline(deadline)

        except ApiError:
            _safe_rollback(session)
            raise
        except SQLAlchemyError as e:
            _safe_rollback(session)
            if is_timeout_error(e):
                logger.error(f"[sale] Database timeout after {timeout_ms}ms: {e}")
                raise CheckoutTimeoutError() from e
            raise

        # 3. Commit
        try:
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[sale] Commit failed: {e}")
            _safe_rollback(session)
            raise TransactionCommitError() from e

    finally:
        session.close()

    logger.info(f"[sale] Committed sale with {len(items)} line(s), total={total}")
    return SaleResult(total_amount=total, line_count=len(items))


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _apply_database_timeouts(session, timeout_ms: Optional[int]) -> None:
    """Bound statement and row-lock waits for this transaction (PostgreSQL only)."""
    if not timeout_ms or session.get_bind().dialect.name != 'postgresql':
        return
    session.execute(
        text("SELECT set_config('statement_timeout', :ms, true), set_config('lock_timeout', :ms, true)"),
        {'ms': str(int(timeout_ms))}
    )


def _check_deadline(deadline: Optional[float]) -> None:
    if deadline is not None and time.monotonic() > deadline:
        logger.error("[sale] Checkout deadline exceeded, rolling back")
        raise CheckoutTimeoutError()


def _safe_rollback(session) -> None:
    """Roll back, logging (not raising) if the connection is already gone."""
    try:
        session.rollback()
    except SQLAlchemyError as e:
        logger.error(f"[sale] Rollback failed: {e}")
