"""
Unit tests for the cart store.
"""

import pytest
from decimal import Decimal

from pos_console.exceptions import WarehouseNotSelectedError, OutOfStockError, StockExceededError
from pos_console.models import CheckoutAdjustments, DiscountType, PaymentMethod

from tests.helpers import make_entry


def assert_lines_within_stock(cart):
    for line in cart.lines:
        assert 1 <= line.quantity <= line.available_stock


class TestAddItem:
    """Tests for CartStore.add_item."""

    def test_add_creates_line_with_snapshots(self, cart, entry):
        line = cart.add_item(entry, 1)

        assert line.quantity == 1
        assert line.unit_price == Decimal('100.00')
        assert line.available_stock == 3
        assert line.batch_number == 'B-001'
        assert line.warehouse_name == 'Main Store'
        assert cart.line_count == 1

    def test_add_requires_selected_warehouse(self, cart, entry):
        with pytest.raises(WarehouseNotSelectedError):
            cart.add_item(entry, None)
        with pytest.raises(WarehouseNotSelectedError):
            cart.add_item(entry, 0)
        assert cart.is_empty

    def test_add_out_of_stock_entry(self, cart):
        with pytest.raises(OutOfStockError):
            cart.add_item(make_entry(remaining=0), 1)
        assert cart.is_empty

    def test_second_add_increments_existing_line(self, cart, entry):
        cart.add_item(entry, 1)
        line = cart.add_item(entry, 1)

        assert cart.line_count == 1
        assert line.quantity == 2

    def test_add_at_ceiling_raises_and_keeps_cart(self, cart, entry):
        for _ in range(3):
            cart.add_item(entry, 1)

        with pytest.raises(StockExceededError) as exc:
            cart.add_item(entry, 1)

        assert exc.value.available == 3
        assert cart.get_line(10, 1).quantity == 3

    def test_same_product_other_warehouse_is_separate_line(self, cart, entry):
        cart.add_item(entry, 1)
        cart.add_item(make_entry(warehouse_id=2, remaining=30, warehouse_name='Back Warehouse'), 1)

        assert cart.line_count == 2
        assert {line.key for line in cart.lines} == {(10, 1), (10, 2)}

    def test_ceiling_is_snapshot_not_fresh_entry(self, cart, entry):
        cart.add_item(entry, 1)
        # A fresher report shows more stock; the line keeps its own ceiling
        fresher = make_entry(remaining=10)
        cart.add_item(fresher, 1)
        cart.add_item(fresher, 1)

        with pytest.raises(StockExceededError):
            cart.add_item(fresher, 1)
        assert cart.get_line(10, 1).available_stock == 3


class TestSetQuantity:
    """Tests for set_quantity / increment / decrement / remove."""

    def test_set_quantity_within_stock(self, cart, entry):
        cart.add_item(entry, 1)
        line = cart.set_quantity(10, 1, 3)

        assert line.quantity == 3
        assert line.unit_price == Decimal('100.00')
        assert line.available_stock == 3

    def test_set_quantity_above_stock_rejected(self, cart, entry):
        cart.add_item(entry, 1)
        cart.set_quantity(10, 1, 2)

        with pytest.raises(StockExceededError):
            cart.set_quantity(10, 1, 4)

        assert cart.get_line(10, 1).quantity == 2

    @pytest.mark.parametrize('quantity', [0, -1])
    def test_set_quantity_zero_or_below_removes(self, cart, entry, quantity):
        cart.add_item(entry, 1)
        assert cart.set_quantity(10, 1, quantity) is None
        assert cart.is_empty

    def test_set_quantity_unknown_key_is_noop(self, cart, entry):
        cart.add_item(entry, 1)
        before = cart.lines

        assert cart.set_quantity(99, 1, 2) is None
        assert cart.lines == before

    def test_increment_and_decrement(self, cart, entry):
        cart.add_item(entry, 1)
        cart.increment(10, 1)
        assert cart.get_line(10, 1).quantity == 2

        cart.decrement(10, 1)
        cart.decrement(10, 1)
        assert cart.get_line(10, 1) is None

    def test_remove_unknown_key_leaves_cart_unchanged(self, cart, entry):
        cart.add_item(entry, 1)
        before = cart.lines

        assert cart.remove_item(10, 2) is False
        assert cart.lines == before

    def test_remove_item(self, cart, entry):
        cart.add_item(entry, 1)
        assert cart.remove_item(10, 1) is True
        assert cart.is_empty

    def test_invariant_holds_through_operation_sequence(self, cart, entry):
        other = make_entry(product_id=12, remaining=2, name='Salt 1kg', price='3.00')
        operations = [
            lambda: cart.add_item(entry, 1),
            lambda: cart.add_item(other, 1),
            lambda: cart.set_quantity(10, 1, 3),
            lambda: cart.add_item(entry, 1),
            lambda: cart.increment(12, 1),
            lambda: cart.increment(12, 1),
            lambda: cart.set_quantity(12, 1, 5),
            lambda: cart.decrement(10, 1),
            lambda: cart.set_quantity(12, 1, 0),
        ]
        for operation in operations:
            try:
                operation()
            except StockExceededError:
                pass
            assert_lines_within_stock(cart)


class TestAdjustments:
    """Tests for adjustments, customer and clear."""

    def test_update_adjustments_coerces_amounts(self, cart):
        adjustments = cart.update_adjustments(discount_type='percentage', discount_value='10', tax_percentage=5)

        assert adjustments.discount_type == DiscountType.PERCENTAGE
        assert adjustments.discount_value == Decimal('10')
        assert adjustments.tax_percentage == Decimal('5')

    @pytest.mark.parametrize('field', ['discount_value', 'tax_percentage', 'paid_amount'])
    @pytest.mark.parametrize('value', ['abc', 'NaN', 'Infinity', '-1', -1, Decimal('NaN')])
    def test_invalid_amount_rejected_and_nothing_stored(self, cart, field, value):
        cart.update_adjustments(discount_value=5, tax_percentage=5, paid_amount=5)
        before = cart.adjustments

        with pytest.raises(ValueError):
            cart.update_adjustments(**{field: value, 'payment_method': 'bank'})

        assert cart.adjustments == before

    def test_amounts_are_rounded_to_the_cent(self, cart):
        adjustments = cart.update_adjustments(paid_amount='200.004', discount_value='1,250.5')

        assert adjustments.paid_amount == Decimal('200.00')
        assert str(adjustments.discount_value) == '1250.50'

    def test_changing_payment_method_drops_account(self, cart):
        cart.update_adjustments(payment_method='cash', payment_account_code='1001')
        adjustments = cart.update_adjustments(payment_method='bank')

        assert adjustments.payment_method == PaymentMethod.BANK
        assert adjustments.payment_account_code is None

    def test_unknown_adjustment_field_rejected(self, cart):
        with pytest.raises(ValueError):
            cart.update_adjustments(shipping=5)

    def test_invalid_payment_method_rejected(self, cart):
        with pytest.raises(ValueError):
            cart.update_adjustments(payment_method='cheque')
        assert cart.adjustments == CheckoutAdjustments()

    def test_clear_resets_everything(self, ready_cart):
        ready_cart.update_adjustments(
            discount_type='percentage', discount_value=5, tax_percentage=10,
            paid_amount=50, payment_method='bank', payment_account_code='1101'
        )
        ready_cart.clear()

        assert ready_cart.is_empty
        assert ready_cart.customer_id is None
        assert ready_cart.adjustments == CheckoutAdjustments()
        # warehouse selection is a screen filter, not a checkout adjustment
        assert ready_cart.selected_warehouse_id == 1
