"""Order routes"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request

from storefront.api.dependencies import get_current_session, require_use_case, verify_csrf_token
from storefront.core.responses import success
from storefront.core.security.session import SessionIdentity
from storefront.domains import DomainContext, orders

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("")
async def get_orders(request: Request, identity: SessionIdentity = Depends(require_use_case("get_orders"))):
    raw_input = {
        "page": request.query_params.get("page", "1"),
        "limit": request.query_params.get("limit", "20"),
        "status": request.query_params.get("status"),
        "userId": request.query_params.get("userId"),
    }
    result = await orders.get_orders(raw_input, DomainContext(session=identity))
    return success(result)


@router.post(
    "",
    status_code=201,
    dependencies=[Depends(require_use_case("create_order")), Depends(verify_csrf_token)],
)
async def create_order(
    body: Optional[Dict[str, Any]] = Body(default=None),
    identity: SessionIdentity = Depends(get_current_session),
):
    result = await orders.create_order(body or {}, DomainContext(session=identity))
    return success(result)


@router.get("/{order_id}")
async def get_order(order_id: str, identity: SessionIdentity = Depends(require_use_case("get_order_by_id"))):
    result = await orders.get_order_by_id({"id": order_id}, DomainContext(session=identity))
    return success(result)


@router.patch(
    "/{order_id}",
    dependencies=[Depends(require_use_case("update_order_status")), Depends(verify_csrf_token)],
)
async def update_order_status(
    order_id: str,
    body: Optional[Dict[str, Any]] = Body(default=None),
    identity: SessionIdentity = Depends(get_current_session),
):
    result = await orders.update_order_status({**(body or {}), "id": order_id}, DomainContext(session=identity))
    return success(result)
