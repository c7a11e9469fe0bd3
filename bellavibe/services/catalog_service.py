"""Product catalog service - plain CRUD over the products table."""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Any

from sqlalchemy.orm import joinedload

from bellavibe.exceptions import ValidationError, NotFoundError
from bellavibe.models import Product, Category
from bellavibe.utils.validation import as_text, is_strict_int

logger = logging.getLogger(__name__)

# Column limits: Numeric(10, 2) price, 32-bit Integer stock
MAX_PRICE = Decimal('100000000')
STOCK_MAX = 2 ** 31 - 1


def list_products(session) -> List[Product]:
    return (
        session.query(Product)
        .options(joinedload(Product.category))
        .order_by(Product.id)
        .all()
    )


def get_product(session, product_id: int) -> Product:
    product = (
        session.query(Product)
        .options(joinedload(Product.category))
        .filter(Product.id == product_id)
        .first()
    )
    if not product:
        raise NotFoundError(f'Product with ID {product_id} not found')
    return product


def _validate_product_data(session, data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and normalize a product payload. Raises ValidationError."""
    errors = []

    name = as_text(data.get('name'))
    if name is None:
        errors.append('name must be a string')
    elif not name:
        errors.append('name is required')

    description = data.get('description') or ''
    if not isinstance(description, str):
        errors.append('description must be a string')

    price = None
    try:
        # str() keeps JSON floats like 19.99 from leaking binary error
        price = Decimal(str(data.get('price')))
        if not price.is_finite() or price < 0 or price >= MAX_PRICE:
            errors.append('price must be a non-negative number')
            price = None
        else:
            price = price.quantize(Decimal('0.01'))
    except (InvalidOperation, TypeError, ValueError):
        errors.append('price must be a non-negative number')

    stock = data.get('stock', 0)
    if not is_strict_int(stock) or stock < 0 or stock > STOCK_MAX:
        errors.append('stock must be a non-negative integer')

    category_id = data.get('category_id')
    if not is_strict_int(category_id):
        errors.append('category_id must be an integer')
    elif not session.query(Category.id).filter(Category.id == category_id).first():
        errors.append(f'Category with ID {category_id} not found')

    if errors:
        raise ValidationError('; '.join(errors))

    return {
        'name': name,
        'description': description,
        'price': price,
        'stock': stock,
        'category_id': category_id,
    }


def create_product(session, data: Dict[str, Any]) -> Product:
    values = _validate_product_data(session, data)
    product = Product(**values)
    session.add(product)
    session.commit()
    logger.info(f"Product created: id={product.id}, name='{product.name}'")
    return product


def update_product(session, product_id: int, data: Dict[str, Any]) -> Product:
    product = session.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError(f'Product with ID {product_id} not found for update')

    values = _validate_product_data(session, data)
    for key, value in values.items():
        setattr(product, key, value)
    session.commit()
    logger.info(f"Product updated: id={product.id}")
    return product


def delete_product(session, product_id: int) -> None:
    product = session.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError(f'Product with ID {product_id} not found for deletion')
    session.delete(product)
    session.commit()
    logger.info(f"Product deleted: id={product_id}")
