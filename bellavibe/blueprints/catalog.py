"""Catalog blueprint for product CRUD."""
from flask import Blueprint

from bellavibe.database import get_session
from bellavibe.middleware import require_auth
from bellavibe.services import catalog_service
from bellavibe.utils.http import success_response, get_json_payload

catalog_bp = Blueprint('catalog', __name__, url_prefix='/products')


@catalog_bp.route('', methods=['GET'])
@require_auth
def list_products():
    """List every product with its category name."""
    products = catalog_service.list_products(get_session())
    return success_response('Products listed successfully!', [p.to_dict() for p in products])


@catalog_bp.route('/<int:product_id>', methods=['GET'])
def get_product(product_id: int):
    product = catalog_service.get_product(get_session(), product_id)
    return success_response(f'Product with ID {product_id} found.', product.to_dict())


@catalog_bp.route('', methods=['POST'])
def create_product():
    product = catalog_service.create_product(get_session(), get_json_payload())
    return success_response(
        f'Product created successfully! ID: {product.id}',
        {'id': product.id},
        201
    )


@catalog_bp.route('/<int:product_id>', methods=['PUT'])
def update_product(product_id: int):
    catalog_service.update_product(get_session(), product_id, get_json_payload())
    return success_response(f'Product with ID {product_id} updated successfully.')


@catalog_bp.route('/<int:product_id>', methods=['DELETE'])
def delete_product(product_id: int):
    catalog_service.delete_product(get_session(), product_id)
    return success_response(f'Product with ID {product_id} deleted successfully.')
