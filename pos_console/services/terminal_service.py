"""Terminal registry - in-memory POS state per browser session."""
import logging
import threading
import time
import uuid
from typing import Dict, Optional

from pos_console.services.cart_service import CartStore
from pos_console.services.catalog_service import CatalogView
from pos_console.services.checkout_service import CheckoutCoordinator

logger = logging.getLogger(__name__)


class Terminal:
    """One operator's POS screen: cart, catalog filter and checkout."""

    def __init__(self, terminal_id: str, client, branch_id: int = 1):
        self.id = terminal_id
        self.cart = CartStore()
        self.catalog = CatalogView(client)
        self.checkout = CheckoutCoordinator(self.cart, client, branch_id=branch_id)
        self.last_seen = time.monotonic()

    def touch(self) -> None:
        self.last_seen = time.monotonic()


class TerminalRegistry:
    """
    Maps terminal ids (kept in the Flask session cookie) to Terminal objects.

    Nothing is persisted: a restart loses every open cart. Terminals idle
    longer than ``idle_ttl`` seconds are dropped on the next lookup. At most
    ``max_terminals`` are kept; opening one more drops the least recently
    seen terminal that is not checking out.
    """

    def __init__(self, client, branch_id: int = 1, idle_ttl: float = 43200, max_terminals: int = 500):
        self.client = client
        self.branch_id = branch_id
        self.idle_ttl = idle_ttl
        self.max_terminals = max_terminals
        self._lock = threading.Lock()
        self._terminals: Dict[str, Terminal] = {}

    def get_or_create(self, terminal_id: Optional[str]) -> Terminal:
        with self._lock:
            self._evict_idle()
            terminal = self._terminals.get(terminal_id) if terminal_id else None
            if terminal is None:
                self._make_room()
                terminal = Terminal(terminal_id or uuid.uuid4().hex, self.client, self.branch_id)
                self._terminals[terminal.id] = terminal
                logger.info(f"[TERMINAL] Opened terminal {terminal.id}")
            terminal.touch()
            return terminal

    def discard(self, terminal_id: str) -> None:
        with self._lock:
            self._terminals.pop(terminal_id, None)

    def __len__(self):
        return len(self._terminals)

    def _evict_idle(self) -> None:
        now = time.monotonic()
        expired = [
            tid for tid, terminal in self._terminals.items()
            if now - terminal.last_seen > self.idle_ttl and not terminal.checkout.is_busy
        ]
        for tid in expired:
            del self._terminals[tid]
            logger.info(f"[TERMINAL] Dropped idle terminal {tid}")

    def _make_room(self) -> None:
        idle = sorted(
            (t for t in self._terminals.values() if not t.checkout.is_busy),
            key=lambda t: t.last_seen
        )
        overflow = len(self._terminals) - self.max_terminals + 1
        for terminal in idle[:max(overflow, 0)]:
            del self._terminals[terminal.id]
            logger.warning(f"[TERMINAL] Registry full, dropped terminal {terminal.id}")
