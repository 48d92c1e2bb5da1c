import uuid

from fastapi import Request

from storefront.schemas.cart import CartOwner

SESSION_CART_KEY = "session_cart_id"
SESSION_USER_KEY = "user_id"


def get_cart_owner(request: Request) -> CartOwner:
    """
    Cart owner from the signed session cookie.

    First-time visitors are issued a session cart id here so every request
    reaching the cart service carries one.
    """
    session_cart_id = request.session.get(SESSION_CART_KEY)
    if not session_cart_id:
        session_cart_id = str(uuid.uuid4())
        request.session[SESSION_CART_KEY] = session_cart_id

    user_id = request.session.get(SESSION_USER_KEY)
    return CartOwner(
        session_cart_id=session_cart_id,
        user_id=str(user_id) if user_id else None
    )
