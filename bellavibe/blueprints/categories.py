"""Categories blueprint: sessions and their categories."""
from flask import Blueprint, request

from bellavibe.database import get_session
from bellavibe.services import category_service
from bellavibe.utils.http import success_response, get_json_payload

categories_bp = Blueprint('categories', __name__, url_prefix='/categories')


@categories_bp.route('', methods=['GET'])
def list_categories():
    """List categories, optionally filtered with ?kind=session|category."""
    kind = request.args.get('kind', '').strip() or None
    categories = category_service.list_categories(get_session(), kind)
    return success_response('Categories listed successfully!', [c.to_dict() for c in categories])


@categories_bp.route('/<int:category_id>', methods=['GET'])
def get_category(category_id: int):
    category = category_service.get_category(get_session(), category_id)
    return success_response(f'Category with ID {category_id} found.', category.to_dict())


@categories_bp.route('', methods=['POST'])
def create_category():
    category = category_service.create_category(get_session(), get_json_payload())
    return success_response(
        f'Category created successfully! ID: {category.id}',
        {'id': category.id},
        201
    )


@categories_bp.route('/<int:category_id>', methods=['PUT'])
def update_category(category_id: int):
    category_service.update_category(get_session(), category_id, get_json_payload())
    return success_response(f'Category with ID {category_id} updated successfully.')


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
def delete_category(category_id: int):
    category_service.delete_category(get_session(), category_id)
    return success_response(f'Category with ID {category_id} deleted successfully.')
