"""Sales blueprint: shared cart and checkout."""
from flask import Blueprint, current_app

from bellavibe.database import get_session, get_session_factory
from bellavibe.exceptions import ApiError, ValidationError
from bellavibe.middleware import require_auth
from bellavibe.services.cart_service import get_cart_store, add_to_cart
from bellavibe.services.sales_service import confirm_sale
from bellavibe.blueprints.metrics import checkout_total, checkout_amount_total
from bellavibe.utils.http import success_response, get_json_payload, require_int

sales_bp = Blueprint('sales', __name__)


@sales_bp.route('/cart/add', methods=['POST'])
@require_auth
def cart_add():
    """Add a product to the cart, merging with an existing line."""
    payload = get_json_payload()
    product_id = require_int(payload, 'product_id')
    quantity = require_int(payload, 'quantity')
    if quantity <= 0:
        raise ValidationError('quantity must be greater than 0')

    add_to_cart(get_cart_store(), get_session(), product_id, quantity)
    return success_response('Item added to cart.')


@sales_bp.route('/cart', methods=['GET'])
@require_auth
def cart_view():
    """Current cart contents."""
    items = get_cart_store().view()
    return success_response('Cart contents', [item.to_dict() for item in items])


@sales_bp.route('/sale', methods=['POST'])
@require_auth
def sale():
    """Check out the whole cart in one transaction."""
    try:
        result = confirm_sale(
            get_cart_store(),
            get_session_factory(),
            timeout_ms=current_app.config.get('CHECKOUT_TIMEOUT_MS'),
        )
    except ApiError as e:
        checkout_total.labels(outcome=e.code.lower()).inc()
        raise

    checkout_total.labels(outcome='committed').inc()
    checkout_amount_total.inc(float(result.total_amount))
    return success_response('Sale completed successfully!', result.to_dict())
