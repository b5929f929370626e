"""Shared test data: fake back-office client, report payloads and entry factory."""
from decimal import Decimal

from pos_console.models import CatalogEntry


WAREHOUSE_REPORT = [
    {
        'warehouse_id': 1,
        'warehouse': {'id': 1, 'name': 'Main Store'},
        'total_stock': 40,
        'remaining_stock': 33,
        'products': [
            {
                'product': {'id': 10, 'name': 'Basmati Rice 5kg', 'sku': 'RICE-5', 'barcode': '111',
                            'selling_price': '100.00', 'purchase_price': '80.00'},
                'purchased_quantity': 20, 'sold_quantity': 17, 'remaining_quantity': 3,
                'batch_no': 'B-001',
            },
            {
                'product': {'id': 11, 'name': 'Sunflower Oil 1L', 'sku': 'OIL-1', 'barcode': '222',
                            'selling_price': '25.50', 'purchase_price': '20.00'},
                'purchased_quantity': 20, 'sold_quantity': 20, 'remaining_quantity': 0,
                'batch_no': 'B-002',
            },
        ],
    },
    {
        'warehouse_id': 2,
        'warehouse': {'id': 2, 'name': 'Back Warehouse'},
        'products': [
            {
                'product': {'id': 10, 'name': 'Basmati Rice 5kg', 'selling_price': '100.00'},
                'remaining_quantity': 30,
                'batch_no': 'B-010',
            },
        ],
    },
]

ACCOUNTS = [
    {'id': 1, 'code': '1001', 'name': 'Cash Drawer', 'isCash': True, 'isBank': False},
    {'id': 2, 'code': '1101', 'name': 'City Bank', 'isCash': False, 'isBank': True},
]


class FakeBackofficeClient:
    """In-memory stand-in for BackofficeClient that records sale requests."""

    def __init__(self):
        self.report = WAREHOUSE_REPORT
        self.accounts = ACCOUNTS
        self.sale_requests = []
        self.report_requests = []
        self.fail_with = None
        self.on_submit = None

    def get_warehouse_report(self, search='', warehouse_id=None):
        self.report_requests.append({'search': search, 'warehouse_id': warehouse_id})
        return self.report

    def get_warehouses(self):
        return [{'id': 1, 'name': 'Main Store'}, {'id': 2, 'name': 'Back Warehouse'}]

    def get_customers(self):
        return [{'id': 7, 'name': 'Walk-in Customer', 'customer_code': 'C-007'}]

    def get_accounts(self):
        return self.accounts

    def get_pos_sales_summary(self, date=None):
        return {'total_sales': 3, 'total_revenue': 540}

    def create_pos_sale(self, payload, idempotency_key=None):
        self.sale_requests.append({'payload': payload, 'idempotency_key': idempotency_key})
        if self.on_submit:
            self.on_submit()
        if self.fail_with:
            raise self.fail_with
        return {'id': 501, 'invoice_number': 'POS-000501'}


def make_entry(product_id=10, warehouse_id=1, remaining=3, price='100.00', name='Basmati Rice 5kg',
               warehouse_name='Main Store', batch='B-001'):
    return CatalogEntry(
        product_id=product_id,
        product_name=name,
        warehouse_id=warehouse_id,
        warehouse_name=warehouse_name,
        remaining_quantity=remaining,
        selling_price=Decimal(price),
        batch_number=batch,
    )


