"""Adjustments blueprint - discount calculation for carts posted as JSON."""

import logging
from flask import Blueprint, request, jsonify, current_app
from discounts.database import get_session
from discounts.services.cart_service import build_cart_from_payload
from discounts.services.adjustment_service import calculate_cart_adjustments

logger = logging.getLogger(__name__)

adjustments_bp = Blueprint('adjustments', __name__, url_prefix='/carts')


@adjustments_bp.route('/<int:cart_id>/adjustments', methods=['POST'])
def calculate_adjustments_for_cart(cart_id):
    """
    Calculate discounts for the posted cart items.

    The cart itself is not stored; only the discounts attached to
    ``cart_id`` (plus auto-apply ones) are read from the database.
    """
    data = request.get_json(silent=True)
    cart = build_cart_from_payload(cart_id, data)

    include_auto_apply = current_app.config.get('DISCOUNTS_INCLUDE_AUTO_APPLY', True)
    discounts = calculate_cart_adjustments(get_session(), cart, include_auto_apply=include_auto_apply)

    response = cart.to_dict()
    response['discounts'] = [
        {
            'id': d.id,
            'code': d.code,
            'amount': d.amount,
            'percent': d.percent,
            'applies_to': d.applies_to.value,
            'max_usage': d.max_usage,
        }
        for d in discounts
    ]
    return jsonify(response), 200
