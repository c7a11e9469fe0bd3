"""
Category service.

Categories form a two-level tree: sessions (no parent) and categories
(parent is a session). These rules are enforced here, not by the schema.
"""
import logging
from typing import Dict, List, Any, Optional

from bellavibe.exceptions import ValidationError, NotFoundError, ConflictError
from bellavibe.models import Category, CategoryKind, Product
from bellavibe.utils.validation import as_text, is_strict_int

logger = logging.getLogger(__name__)


def list_categories(session, kind: Optional[str] = None) -> List[Category]:
    query = session.query(Category)
    if kind:
        try:
            kind = CategoryKind(kind)
        except ValueError:
            raise ValidationError(f"kind must be one of: {', '.join(k.value for k in CategoryKind)}")
        if kind is CategoryKind.SESSION:
            query = query.filter(Category.parent_id.is_(None))
        else:
            query = query.filter(Category.parent_id.isnot(None))
    return query.order_by(Category.id).all()


def get_category(session, category_id: int) -> Category:
    category = session.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError(f'Category with ID {category_id} not found')
    return category


def _validate_category_data(session, data: Dict[str, Any], category: Optional[Category] = None) -> Dict[str, Any]:
    name = as_text(data.get('name'))
    if name is None:
        raise ValidationError('name must be a string')
    if not name:
        raise ValidationError('name is required')

    parent_id = data.get('parent_id')
    if parent_id is None:
        return {'name': name, 'parent_id': None}

    if not is_strict_int(parent_id):
        raise ValidationError('parent_id must be an integer or null')

    if category is not None:
        if parent_id == category.id:
            raise ValidationError('A category cannot be its own parent')
        if category.children:
            raise ValidationError('A session with categories cannot be moved under another session')

    parent = session.query(Category).filter(Category.id == parent_id).first()
    if not parent:
        raise ValidationError(f'Invalid parent_id: category {parent_id} not found')
    if not parent.is_session:
        raise ValidationError(f'Invalid parent_id: category {parent_id} is not a session')

    return {'name': name, 'parent_id': parent_id}


def create_category(session, data: Dict[str, Any]) -> Category:
    values = _validate_category_data(session, data)
    category = Category(**values)
    session.add(category)
    session.commit()
    logger.info(f"Category created: id={category.id}, kind={category.kind.value}")
    return category


def update_category(session, category_id: int, data: Dict[str, Any]) -> Category:
    category = session.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError(f'Category with ID {category_id} not found for update')

    values = _validate_category_data(session, data, category)
    category.name = values['name']
    category.parent_id = values['parent_id']
    session.commit()
    logger.info(f"Category updated: id={category.id}")
    return category


def delete_category(session, category_id: int) -> None:
    category = session.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError(f'Category with ID {category_id} not found for deletion')

    if category.children:
        raise ConflictError('Cannot delete a session that still has categories')
    in_use = session.query(Product.id).filter(Product.category_id == category_id).first()
    if in_use:
        raise ConflictError('Cannot delete a category that still has products')

    session.delete(category)
    session.commit()
    logger.info(f"Category deleted: id={category_id}")
