"""Orders domain. Placeholder operations until real order logic lands."""

from typing import Any, Dict

from storefront.core.exceptions import not_implemented
from storefront.domains import DomainContext


async def get_orders(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("orders", "get_orders")


async def get_order_by_id(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("orders", "get_order_by_id")


async def create_order(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("orders", "create_order")


async def update_order_status(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("orders", "update_order_status")
