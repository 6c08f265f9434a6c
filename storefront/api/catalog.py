"""Catalog routes. Reads for every role, writes for admins."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request

from storefront.api.dependencies import get_current_session, require_use_case, verify_csrf_token
from storefront.core.responses import success
from storefront.core.security.session import SessionIdentity
from storefront.domains import DomainContext, catalog

router = APIRouter(prefix="/api/catalog/products", tags=["catalog"])


@router.get("")
async def get_products(request: Request, identity: SessionIdentity = Depends(require_use_case("get_products"))):
    raw_input = {
        "page": request.query_params.get("page", "1"),
        "limit": request.query_params.get("limit", "20"),
        "keyword": request.query_params.get("keyword"),
    }
    result = await catalog.get_products(raw_input, DomainContext(session=identity))
    return success(result)


@router.post(
    "",
    status_code=201,
    dependencies=[Depends(require_use_case("create_product")), Depends(verify_csrf_token)],
)
async def create_product(
    body: Optional[Dict[str, Any]] = Body(default=None),
    identity: SessionIdentity = Depends(get_current_session),
):
    result = await catalog.create_product(body or {}, DomainContext(session=identity))
    return success(result)


@router.get("/{product_id}")
async def get_product(product_id: str, identity: SessionIdentity = Depends(require_use_case("get_product_by_id"))):
    result = await catalog.get_product_by_id({"id": product_id}, DomainContext(session=identity))
    return success(result)


@router.put(
    "/{product_id}",
    dependencies=[Depends(require_use_case("update_product")), Depends(verify_csrf_token)],
)
async def update_product(
    product_id: str,
    body: Optional[Dict[str, Any]] = Body(default=None),
    identity: SessionIdentity = Depends(get_current_session),
):
    result = await catalog.update_product({**(body or {}), "id": product_id}, DomainContext(session=identity))
    return success(result)


@router.delete(
    "/{product_id}",
    dependencies=[Depends(require_use_case("delete_product")), Depends(verify_csrf_token)],
)
async def delete_product(product_id: str, identity: SessionIdentity = Depends(get_current_session)):
    result = await catalog.delete_product({"id": product_id}, DomainContext(session=identity))
    return success(result)
