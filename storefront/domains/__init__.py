"""
Domain entry points (catalog, cart, orders).

Each operation receives the raw request input and a context carrying the
caller's session. Business logic is not implemented yet: every operation
raises DomainNotImplementedError, which the API renders as a 501 envelope.
"""

from dataclasses import dataclass

from storefront.core.security.session import SessionIdentity


@dataclass(frozen=True)
class DomainContext:
    session: SessionIdentity
