"""POS blueprint - JSON actions of the point-of-sale screen."""
from flask import Blueprint, request, session, jsonify, current_app

from pos_console.exceptions import (
    BusinessLogicError, CheckoutInProgressError, CheckoutValidationError,
    OutOfStockError, SaleSubmissionFailedError, StockExceededError, WarehouseNotSelectedError
)
from pos_console.blueprints.metrics import record_cart_rejection, record_checkout, checkouts_in_flight
from pos_console.services.checkout_service import accounts_for_method
from pos_console.services.pricing_service import line_totals
from pos_console.utils.formatters import jsonable, money
from pos_console.utils.number_format import parse_amount, parse_quantity

pos_bp = Blueprint('pos', __name__, url_prefix='/pos')

CART_GUARDS = (WarehouseNotSelectedError, OutOfStockError, StockExceededError)


def _terminal():
    """Terminal of the current browser session (created on first use)."""
    registry = current_app.extensions['pos_terminals']
    terminal = registry.get_or_create(session.get('terminal_id'))
    if session.get('terminal_id') != terminal.id:
        session['terminal_id'] = terminal.id
        session.permanent = True
    return terminal


def _client():
    return current_app.extensions['backoffice_client']


def _payload() -> dict:
    return request.get_json(silent=True) or {}


def _optional_id(value, field: str):
    if value in (None, '', 0, '0'):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BusinessLogicError(f'{field} must be an integer')


def _required_id(value, field: str) -> int:
    parsed = _optional_id(value, field)
    if parsed is None:
        raise BusinessLogicError(f'{field} is required')
    return parsed


def _cart_state(terminal) -> dict:
    cart = terminal.cart
    totals = terminal.checkout.totals()
    symbol = current_app.config.get('CURRENCY_SYMBOL', '৳')
    return jsonable({
        'customer_id': cart.customer_id,
        'selected_warehouse_id': cart.selected_warehouse_id,
        'lines': line_totals(cart.lines),
        'item_count': cart.line_count,
        'adjustments': cart.adjustments.to_dict(),
        'totals': totals.to_dict(),
        'display': {
            'subtotal': money(totals.subtotal, symbol),
            'total': money(totals.total, symbol),
            'due': money(totals.due, symbol),
        },
        'checkout_state': terminal.checkout.state.value,
    })


def _ok(terminal, message: str = None, status: int = 200, **extra):
    body = {'status': 'success', 'cart': _cart_state(terminal)}
    if message:
        body['message'] = message
    body.update(jsonable(extra))
    return jsonify(body), status


# =====================================================
# STATE & CATALOG
# =====================================================

@pos_bp.route('/', methods=['GET'])
def state():
    """Current cart, adjustments and totals of this terminal."""
    return _ok(_terminal())


@pos_bp.route('/catalog', methods=['GET'])
def catalog():
    """Refresh the stock report and return the purchasable entries."""
    terminal = _terminal()
    search = request.args.get('search', '')
    warehouse_id = request.args.get('warehouse_id')
    if warehouse_id is not None:
        warehouse_id = _optional_id(warehouse_id, 'warehouse_id') or 0
    else:
        warehouse_id = terminal.cart.selected_warehouse_id or 0

    entries = terminal.catalog.refresh(search=search, warehouse_id=warehouse_id)
    return jsonify({
        'status': 'success',
        'search': terminal.catalog.search,
        'warehouse_id': terminal.catalog.warehouse_id,
        'entries': jsonable([entry.to_dict() for entry in entries]),
    })


@pos_bp.route('/warehouses', methods=['GET'])
def warehouses():
    return jsonify({'status': 'success', 'data': _client().get_warehouses()})


@pos_bp.route('/customers', methods=['GET'])
def customers():
    return jsonify({'status': 'success', 'data': _client().get_customers()})


@pos_bp.route('/warehouse', methods=['POST'])
def select_warehouse():
    """Select the warehouse to sell from (also filters the catalog). 0 = all."""
    terminal = _terminal()
    warehouse_id = _optional_id(_payload().get('warehouse_id'), 'warehouse_id')
    terminal.cart.select_warehouse(warehouse_id)
    terminal.catalog.warehouse_id = warehouse_id
    return _ok(terminal)


@pos_bp.route('/customer', methods=['POST'])
def select_customer():
    terminal = _terminal()
    terminal.cart.set_customer(_optional_id(_payload().get('customer_id'), 'customer_id'))
    return _ok(terminal)


# =====================================================
# CART
# =====================================================

@pos_bp.route('/cart/items', methods=['POST'])
def add_item():
    """Add one unit of a catalog entry (product + warehouse) to the cart."""
    terminal = _terminal()
    data = _payload()
    product_id = _required_id(data.get('product_id'), 'product_id')
    warehouse_id = _required_id(data.get('warehouse_id'), 'warehouse_id')

    entry = terminal.catalog.find(product_id, warehouse_id, data.get('batch_number'))
    try:
        line = terminal.cart.add_item(entry, terminal.cart.selected_warehouse_id)
    except CART_GUARDS as e:
        record_cart_rejection(e.payload['code'])
        raise

    return _ok(terminal, f'{line.product_name} added to cart', status=201)


@pos_bp.route('/cart/items/<int:product_id>/<int:warehouse_id>', methods=['PATCH'])
def update_item(product_id, warehouse_id):
    """Set a line quantity, or step it with {"action": "increment"|"decrement"}."""
    terminal = _terminal()
    data = _payload()
    action = data.get('action')

    try:
        if action == 'increment':
            terminal.cart.increment(product_id, warehouse_id)
        elif action == 'decrement':
            terminal.cart.decrement(product_id, warehouse_id)
        elif action is None:
            try:
                quantity = parse_quantity(data.get('quantity'))
            except ValueError as e:
                raise BusinessLogicError(str(e))
            terminal.cart.set_quantity(product_id, warehouse_id, quantity)
        else:
            raise BusinessLogicError(f'Unknown action: {action}')
    except StockExceededError as e:
        record_cart_rejection(e.payload['code'])
        raise

    return _ok(terminal)


@pos_bp.route('/cart/items/<int:product_id>/<int:warehouse_id>', methods=['DELETE'])
def remove_item(product_id, warehouse_id):
    terminal = _terminal()
    removed = terminal.cart.remove_item(product_id, warehouse_id)
    return _ok(terminal, 'Item removed from cart' if removed else None)


@pos_bp.route('/cart/clear', methods=['POST'])
def clear_cart():
    terminal = _terminal()
    terminal.cart.clear()
    return _ok(terminal, 'Cart cleared')


@pos_bp.route('/adjustments', methods=['PUT', 'PATCH'])
def update_adjustments():
    """Update discount, tax and payment fields (any subset)."""
    terminal = _terminal()
    data = _payload()
    changes = {}

    try:
        for name, label in (('discount_value', 'Discount'), ('tax_percentage', 'Tax'), ('paid_amount', 'Paid amount')):
            if name in data:
                changes[name] = parse_amount(data[name], label)
        for name in ('discount_type', 'payment_method', 'payment_account_code'):
            if name in data:
                changes[name] = data[name]
        terminal.cart.update_adjustments(**changes)
    except ValueError as e:
        raise BusinessLogicError(str(e))

    return _ok(terminal)


@pos_bp.route('/accounts', methods=['GET'])
def accounts():
    """Payment accounts selectable for the terminal's current payment method."""
    terminal = _terminal()
    method = terminal.cart.adjustments.payment_method
    selectable = accounts_for_method(_client().get_accounts(), method)
    return jsonify({'status': 'success', 'payment_method': method.value, 'data': selectable})


# =====================================================
# CHECKOUT
# =====================================================

@pos_bp.route('/checkout', methods=['POST'])
def checkout():
    """Validate and submit the sale. The cart is cleared only on success."""
    terminal = _terminal()
    try:
        with checkouts_in_flight.track_inprogress():
            receipt = terminal.checkout.submit()
    except CheckoutInProgressError:
        record_checkout('busy')
        raise
    except CheckoutValidationError:
        record_checkout('invalid')
        raise
    except SaleSubmissionFailedError:
        record_checkout('failed')
        raise

    record_checkout('completed')
    current_app.logger.info(f"Sale completed on terminal {terminal.id}: {receipt.sale_id}")
    return _ok(terminal, 'Sale completed successfully!', status=201, receipt=receipt.to_dict())


@pos_bp.route('/summary', methods=['GET'])
def sales_summary():
    """Today's POS sales summary (or the given ?date=YYYY-MM-DD)."""
    data = _client().get_pos_sales_summary(request.args.get('date'))
    return jsonify({'status': 'success', 'data': data})
