"""Models package - exports all SQLAlchemy models."""
from bellavibe.models.category import Category, CategoryKind
from bellavibe.models.product import Product
from bellavibe.models.user import User

__all__ = [
    'Category', 'CategoryKind',
    'Product',
    'User',
]
