"""Cart domain. Placeholder operations until real cart logic lands."""

from typing import Any, Dict

from storefront.core.exceptions import not_implemented
from storefront.domains import DomainContext


async def get_cart(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("cart", "get_cart")


async def add_to_cart(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("cart", "add_to_cart")


async def update_cart_item(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("cart", "update_cart_item")


async def remove_from_cart(raw_input: Dict[str, Any], context: DomainContext) -> Dict[str, Any]:
    raise not_implemented("cart", "remove_from_cart")
