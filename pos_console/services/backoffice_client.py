"""Back-office REST API client (inventory reports, customers, accounts, POS sales)."""
import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests

from pos_console.exceptions import BackofficeError

logger = logging.getLogger(__name__)


class _DecimalEncoder(json.JSONEncoder):
    """Send Decimals as JSON numbers, the way the API expects amounts."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return int(obj) if obj == obj.to_integral_value() else float(obj)
        return super().default(obj)


class BackofficeClient:
    """Client for the back-office REST API."""

    SALE_ENDPOINT = '/pos/sales'

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        """
        Initialize the back-office client.

        Args:
            base_url: API root, e.g. https://erp.example.com/api/v1
            token: Bearer token of the POS operator (optional)
            timeout: Per-request timeout in seconds
            session: Pre-built requests.Session (tests inject one)
        """
        if not base_url:
            raise ValueError("BACKOFFICE_API_URL is required")

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        })
        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'

    @classmethod
    def from_config(cls, config) -> 'BackofficeClient':
        return cls(
            base_url=config.get('BACKOFFICE_API_URL'),
            token=config.get('BACKOFFICE_API_TOKEN'),
            timeout=config.get('BACKOFFICE_TIMEOUT', 10),
        )

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    def get_warehouse_report(self, search: str = '', warehouse_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Warehouse-wise stock report.

        Returns:
            List of ``{warehouse_id, warehouse: {id, name}, products: [...]}``
        """
        params = {}
        if search:
            params['search'] = search
        if warehouse_id:
            params['warehouse_id'] = warehouse_id
        return self._get('/inventory/report/warehouse-wise', params=params) or []

    def get_warehouses(self) -> List[Dict[str, Any]]:
        return self._get('/warehouses') or []

    def get_customers(self) -> List[Dict[str, Any]]:
        return self._get('/customers') or []

    def get_accounts(self) -> List[Dict[str, Any]]:
        """Asset accounts that can receive payments (cash drawers and banks)."""
        params = {'type': 'asset', 'isCash': 'true', 'isBank': 'true'}
        return self._get('/accounts', params=params) or []

    def get_pos_sales_summary(self, date: Optional[str] = None) -> Dict[str, Any]:
        """Today's POS totals (sales count, revenue, per-method breakdown)."""
        params = {'date': date} if date else None
        return self._get('/pos/sales-summary', params=params) or {}

    # ------------------------------------------------------------------
    # Sale creation
    # ------------------------------------------------------------------

    def create_pos_sale(self, payload: Dict[str, Any], idempotency_key: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a sale in the back office.

        Args:
            payload: Sale request (customer, adjustments, items, payments)
            idempotency_key: Sent as Idempotency-Key so a retried request is not booked twice

        Returns:
            The ``data`` part of the success envelope

        Raises:
            BackofficeError: network failure or error envelope
        """
        headers = {'Idempotency-Key': idempotency_key} if idempotency_key else None
        logger.info(
            f"[BACKOFFICE] Creating POS sale: customer={payload.get('customer_id')} "
            f"items={len(payload.get('items', []))}"
        )
        data = self._request('POST', self.SALE_ENDPOINT, payload=payload, headers=headers)
        return data if isinstance(data, dict) else {'result': data}

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request('GET', path, params=params)

    def _request(self, method: str, path: str, params=None, payload=None, headers=None) -> Any:
        url = f"{self.base_url}{path}"
        body = json.dumps(payload, cls=_DecimalEncoder) if payload is not None else None

        try:
            response = self.session.request(
                method, url, params=params, data=body, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            message = _error_message(e.response)
            status = e.response.status_code if e.response is not None else None
            logger.error(f"[BACKOFFICE] {method} {path} failed [{status}]: {message}")
            raise BackofficeError(message, status) from e
        except requests.RequestException as e:
            logger.error(f"[BACKOFFICE] {method} {path} unreachable: {e}")
            raise BackofficeError(None, None) from e

        if not response.content:
            return None

        try:
            envelope = response.json()
        except ValueError as e:
            logger.error(f"[BACKOFFICE] {method} {path} returned invalid JSON")
            raise BackofficeError("Invalid response from back office", response.status_code) from e

        if isinstance(envelope, dict):
            if envelope.get('success') is False or envelope.get('status') == 'error':
                message = envelope.get('message')
                logger.error(f"[BACKOFFICE] {method} {path} error envelope: {message}")
                raise BackofficeError(message, response.status_code)
            if 'data' in envelope:
                return envelope['data']
        return envelope


def _error_message(response: Optional[requests.Response]) -> Optional[str]:
    """Human-readable message of an error envelope, if the server sent one."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get('message') or body.get('error')
        if isinstance(message, list):
            message = '; '.join(str(m) for m in message)
        return message or None
    return None
