"""
Cart mutations and the cart read model.

Every mutation re-reads the owner's cart, checks the catalog, rewrites the
whole item list with freshly computed prices in one versioned update and
reports back an ActionResult. Nothing raised inside an operation crosses
this module's boundary.
"""
import logging
from typing import Awaitable, Callable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.core.errors import (
    CartError,
    InsufficientStock,
    InvalidArgument,
    NotFound,
    SessionMissing,
    StaleCartError,
    ValidationError,
    UNKNOWN_ERROR_MESSAGE,
)
from storefront.core.events import CartChanged, cart_events
from storefront.core.money import format_money
from storefront.db.models import Cart
from storefront.schemas.cart import ActionResult, CartItem, CartOwner, CartView
from storefront.schemas.product import ProductSnapshot
from storefront.services import cart_store, catalog
from storefront.services.pricing import calc_price

logger = logging.getLogger(__name__)


def _require_session(owner: Optional[CartOwner]):
    if owner is None or not owner.session_cart_id:
        raise SessionMissing()


def _parse_item(data: Union[CartItem, Mapping]) -> CartItem:
    try:
        if isinstance(data, CartItem):
            return CartItem.model_validate(data.model_dump())
        return CartItem.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)


def _load_items(cart: Optional[Cart]) -> List[CartItem]:
    if cart is None:
        return []
    return [CartItem.model_validate(item) for item in cart.items or []]


def _find_line(items: List[CartItem], product_id: str) -> Optional[CartItem]:
    return next((item for item in items if item.product_id == product_id), None)


async def _get_product_or_fail(db: AsyncSession, product_id: str) -> ProductSnapshot:
    product = await catalog.get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")
    return product


async def _get_cart_or_fail(db: AsyncSession, owner: CartOwner) -> Cart:
    cart = await cart_store.find_cart(db, owner)
    if not cart:
        raise NotFound("Cart not found")
    return cart


async def _save(db: AsyncSession, cart: Cart, items: List[CartItem]) -> Cart:
    return await cart_store.update_cart(db, cart, items, calc_price(items))


async def _describe_line(db: AsyncSession, line: CartItem) -> Tuple[str, str]:
    # Lines outlive catalog entries; fall back to the snapshot taken at add time
    product = await catalog.get_product(db, line.product_id)
    if product:
        return product.name, product.slug
    return line.name, line.slug


async def _notify(cart: Cart, owner: CartOwner, product_id: str, slug: str, action: str):
    await cart_events.publish(CartChanged(
        cart_id=str(cart.id),
        session_cart_id=owner.session_cart_id,
        user_id=owner.user_id,
        product_id=product_id,
        slug=slug,
        action=action
    ))


async def _run_action(
    db: AsyncSession,
    action: str,
    operation: Callable[[], Awaitable[str]]
) -> ActionResult:
    attempts = max(1, settings.CART_UPDATE_RETRIES)

    for attempt in range(1, attempts + 1):
        try:
            message = await operation()
        except StaleCartError:
            await db.rollback()
            logger.warning(f"{action}: cart changed concurrently (attempt {attempt}/{attempts})")
            continue
        except CartError as e:
            await db.rollback()
            logger.warning(f"{action} rejected: {e.message}")
            return ActionResult(success=False, message=e.message)
        except Exception:
            await db.rollback()
            logger.exception(f"{action} failed")
            return ActionResult(success=False, message=UNKNOWN_ERROR_MESSAGE)

        logger.info(f"{action}: {message}")
        return ActionResult(success=True, message=message)

    return ActionResult(success=False, message=StaleCartError().message)


async def add_or_increment(
    db: AsyncSession,
    owner: CartOwner,
    item: Union[CartItem, Mapping],
    delta_qty: Optional[int] = None
) -> ActionResult:
    """
    Put `delta_qty` units of a product in the cart (defaults to the item's qty).

    A new line keeps the caller's name/slug/image/price snapshot. An existing
    line only has its quantity raised; its captured price is kept.
    """
    async def operation() -> str:
        _require_session(owner)
        line = _parse_item(item)
        qty = line.qty if delta_qty is None else delta_qty
        if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
            raise InvalidArgument("Quantity must be greater than 0")

        product = await _get_product_or_fail(db, line.product_id)
        cart = await cart_store.find_cart(db, owner)
        items = _load_items(cart)
        existing = _find_line(items, line.product_id)

        if existing:
            if product.stock < existing.qty + qty:
                raise InsufficientStock(product.stock)
            existing.qty = existing.qty + qty
        else:
            if product.stock < qty:
                raise InsufficientStock(product.stock)
            items.append(line.model_copy(update={"qty": qty}))

        if cart is None:
            cart = await cart_store.create_cart(db, owner, items, calc_price(items))
        else:
            cart = await _save(db, cart, items)

        await _notify(cart, owner, product.id, product.slug, "updated" if existing else "added")

        noun = "items" if qty > 1 else "item"
        verb = "updated in" if existing else "added to"
        return f"{qty} {noun} of {product.name} {verb} cart"

    return await _run_action(db, "add_or_increment", operation)


async def decrement_by_one(db: AsyncSession, owner: CartOwner, product_id: str) -> ActionResult:
    async def operation() -> str:
        _require_session(owner)
        cart = await _get_cart_or_fail(db, owner)
        items = _load_items(cart)

        existing = _find_line(items, product_id)
        if not existing:
            raise NotFound("Item not found")

        name, slug = await _describe_line(db, existing)

        if existing.qty == 1:
            items = [i for i in items if i.product_id != product_id]
            action = "removed"
        else:
            existing.qty = existing.qty - 1
            action = "decremented"

        cart = await _save(db, cart, items)
        await _notify(cart, owner, product_id, slug, action)
        return f"{name} was removed from cart"

    return await _run_action(db, "decrement_by_one", operation)


async def set_exact_quantity(
    db: AsyncSession,
    owner: CartOwner,
    product_id: str,
    quantity: int
) -> ActionResult:
    """Overwrite the quantity of a line already in the cart."""
    async def operation() -> str:
        _require_session(owner)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidArgument("Quantity must be greater than 0")

        product = await _get_product_or_fail(db, product_id)
        if product.stock < quantity:
            raise InsufficientStock(product.stock)

        cart = await _get_cart_or_fail(db, owner)
        items = _load_items(cart)
        existing = _find_line(items, product_id)
        if not existing:
            raise NotFound("Item not found in cart")

        if existing.qty != quantity:
            existing.qty = quantity
            cart = await _save(db, cart, items)
            await _notify(cart, owner, product.id, product.slug, "quantity_set")

        return f"{product.name} quantity updated to {quantity}"

    return await _run_action(db, "set_exact_quantity", operation)


async def remove_line(db: AsyncSession, owner: CartOwner, product_id: str) -> ActionResult:
    async def operation() -> str:
        _require_session(owner)
        cart = await _get_cart_or_fail(db, owner)
        items = _load_items(cart)

        existing = _find_line(items, product_id)
        if not existing:
            raise NotFound("Item not found")

        name, slug = await _describe_line(db, existing)

        items = [i for i in items if i.product_id != product_id]
        cart = await _save(db, cart, items)
        await _notify(cart, owner, product_id, slug, "removed")
        return f"{name} removed from cart"

    return await _run_action(db, "remove_line", operation)


async def get_cart_view(db: AsyncSession, owner: CartOwner) -> Optional[CartView]:
    """Plain, serializable snapshot of the owner's cart, or None if there is none."""
    _require_session(owner)
    cart = await cart_store.find_cart(db, owner)

    if not cart:
        return None

    items = _load_items(cart)
    return CartView(
        id=str(cart.id),
        session_cart_id=str(cart.session_cart_id),
        user_id=str(cart.user_id) if cart.user_id is not None else None,
        items=items,
        item_count=sum(item.qty for item in items),
        items_price=format_money(cart.items_price),
        shipping_price=format_money(cart.shipping_price),
        tax_price=format_money(cart.tax_price),
        total_price=format_money(cart.total_price)
    )
