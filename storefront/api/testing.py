"""State reset for end-to-end test runs. Disabled in production."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront.api.dependencies import get_csrf_store, get_settings
from storefront.core.config import Settings
from storefront.core.security.csrf import CsrfTokenStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/test", tags=["testing"])


@router.post("/reset")
async def reset_stores(
    settings: Settings = Depends(get_settings),
    store: CsrfTokenStore = Depends(get_csrf_store),
):
    if settings.is_production:
        return JSONResponse(status_code=404, content={"error": "Not available in production"})

    await store.reset()
    logger.info("🧹 All stores reset")
    return {"success": True, "message": "All stores reset"}
