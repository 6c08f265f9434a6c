"""Catalog domain. Placeholder operations until real catalog logic lands."""

from typing import Any, Dict

from storefront.core.exceptions import not_implemented
from storefront.domains import DomainContext


async def get_products(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("catalog", "get_products")


async def get_product_by_id(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("catalog", "get_product_by_id")


async def create_product(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("catalog", "create_product")


async def update_product(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("catalog", "update_product")


async def delete_product(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("catalog", "delete_product")
