"""Cart routes (buyer only)"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from storefront.api.dependencies import get_current_session, require_use_case, verify_csrf_token
from storefront.core.responses import success
from storefront.core.security.session import SessionIdentity
from storefront.domains import DomainContext, cart

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("")
async def get_cart(identity: SessionIdentity = Depends(require_use_case("get_cart"))):
    result = await cart.get_cart({}, DomainContext(session=identity))
    return success(result)


@router.post(
    "/items",
    status_code=201,
    dependencies=[Depends(require_use_case("add_to_cart")), Depends(verify_csrf_token)],
)
async def add_to_cart(
    body: Optional[Dict[str, Any]] = Body(default=None),
    identity: SessionIdentity = Depends(get_current_session),
):
    result = await cart.add_to_cart(body or {}, DomainContext(session=identity))
    return success(result)


@router.put(
    "/items/{product_id}",
    dependencies=[Depends(require_use_case("update_cart_item")), Depends(verify_csrf_token)],
)
async def update_cart_item(
    product_id: str,
    body: Optional[Dict[str, Any]] = Body(default=None),
    identity: SessionIdentity = Depends(get_current_session),
):
    raw_input = {**(body or {}), "productId": product_id}
    result = await cart.update_cart_item(raw_input, DomainContext(session=identity))
    return success(result)


@router.delete(
    "/items/{product_id}",
    dependencies=[Depends(require_use_case("remove_from_cart")), Depends(verify_csrf_token)],
)
async def remove_from_cart(product_id: str, identity: SessionIdentity = Depends(get_current_session)):
    result = await cart.remove_from_cart({"productId": product_id}, DomainContext(session=identity))
    return success(result)
