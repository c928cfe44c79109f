from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from app.services.shopify_auth_service import shopify_auth_service
from app.utils.logger import get_logger

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = get_logger(__name__)


class OAuthCallbackRequest(BaseModel):
    code: Optional[str] = None
    shop: Optional[str] = None
    state: Optional[str] = None


@router.post("/callback")
async def oauth_callback(body: OAuthCallbackRequest):
    """
    Called by the dashboard after Shopify redirects back with ?code=...&shop=...
    Returns the access token plus the shop and user profile.
    """
    result = await shopify_auth_service.handle_callback(code=body.code, shop=body.shop)
    return {"success": True, **result}


@router.post("/logout")
async def logout():
    # Tokens are held by the frontend only; nothing to revoke here.
    logger.info("User logged out")
    return {"success": True, "message": "Logged out successfully"}
