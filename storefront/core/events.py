"""
In-process "cart changed" notifications.

Views that depend on a cart (header badge, cart page) subscribe here and are
told to re-fetch after every successful mutation. Listeners may be plain or
async callables; a failing listener is logged and never fails the mutation.
"""
import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartChanged:
    cart_id: str
    session_cart_id: str
    user_id: Optional[str]
    product_id: str
    slug: str
    action: str


Listener = Callable[[CartChanged], Union[None, Awaitable[None]]]


class CartEvents:
    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Listener:
        if listener not in self._listeners:
            self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def publish(self, event: CartChanged):
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Cart event listener {listener!r} failed for cart {event.cart_id}")


cart_events = CartEvents()
