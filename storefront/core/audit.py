# storefront/core/audit.py
"""
Audit hooks.

Every audit entry is logged (sanitized) and handed to the registered hooks,
e.g. to persist it. A failing hook is logged and never breaks the request.
"""

import inspect
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from storefront.core.logging_config import sanitize_for_log

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS_CHANGE = "status_change"
    LOGIN = "login"
    LOGOUT = "logout"


class AuditLogEntry(BaseModel):
    action: AuditAction
    actor_id: str
    target_type: str
    target_id: str
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


AuditHook = Callable[[AuditLogEntry], Union[None, Awaitable[None]]]

_audit_hooks: List[AuditHook] = []


def register_audit_hook(hook: AuditHook) -> Callable[[], None]:
    """Register a hook; returns a function that unregisters it"""
    _audit_hooks.append(hook)

    def unregister() -> None:
        if hook in _audit_hooks:
            _audit_hooks.remove(hook)

    return unregister


async def record_audit(
    action: AuditAction,
    actor_id: str,
    target_type: str,
    target_id: str,
    details: Optional[Dict[str, Any]] = None
) -> AuditLogEntry:
    entry = AuditLogEntry(
        action=action,
        actor_id=actor_id,
        target_type=target_type,
        target_id=target_id,
        details=sanitize_for_log(details or {}),
    )

    logger.info(
        f"📝 Audit: {entry.action.value} {entry.target_type}/{entry.target_id} "
        f"by {entry.actor_id} {entry.details}"
    )

    for hook in list(_audit_hooks):
        try:
            result = hook(entry)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.error("Audit hook failed", exc_info=True)

    return entry


def clear_audit_hooks() -> None:
    """Remove every hook (tests)"""
    _audit_hooks.clear()
