from typing import Any, Dict

import httpx
from fastapi import HTTPException, status

from app.config.settings import settings
from app.services.shopify_service import ShopifyService
from app.utils.logger import get_logger
from app.utils.security import is_valid_shop_domain, mask_token

logger = get_logger(__name__)

SHOP_FIELDS = ("id", "name", "domain", "email", "phone", "address1", "city", "province", "country", "zip")
USER_FIELDS = ("id", "first_name", "last_name", "email", "avatar_url", "image", "role", "permissions")


class ShopifyAuthService:
    """Exchanges an OAuth authorization code for an access token.

    Nothing is stored server-side: the token is handed back to the frontend
    together with the shop and the installing user's profile.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    # ------------------------------------------------------------------
    # Callback / token exchange
    # ------------------------------------------------------------------

    async def handle_callback(self, code: str | None, shop: str | None) -> Dict[str, Any]:
        logger.debug("handle_callback called — shop=%s code_present=%s", shop, bool(code))

        if not code or not shop:
            logger.warning("handle_callback rejected — missing code or shop")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing required parameters: code and shop",
            )

        if not is_valid_shop_domain(shop):
            logger.warning("handle_callback rejected — invalid shop domain: %s", shop)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid shop domain",
            )

        if not settings.shopify_api_key or not settings.shopify_api_secret:
            logger.error("handle_callback rejected — SHOPIFY_API_KEY / SHOPIFY_API_SECRET not set")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="OAuth configuration missing",
            )

        access_token = await self._exchange_code(shop, code)

        # ── Shop + current user profile ────────────────────────────────────
        service = ShopifyService(shop, access_token, transport=self._transport)
        shop_data = await service.get_shop_info()
        user_data = await service.get_current_user()

        logger.info("─" * 60)
        logger.info("OAUTH FLOW COMPLETE ✓")
        logger.info("  shop            : %s", shop)
        logger.info("  shop name       : %s", shop_data.get("name", "(unknown)"))
        logger.info("  token (masked)  : %s", mask_token(access_token))
        logger.info("  user            : id=%s email=%s", user_data.get("id"), user_data.get("email", "(none)"))
        logger.info("─" * 60)

        return {
            "access_token": access_token,
            "shop": {key: shop_data.get(key) for key in SHOP_FIELDS},
            "user": {key: user_data.get(key) for key in USER_FIELDS},
        }

    async def _exchange_code(self, shop: str, code: str) -> str:
        token_url = f"https://{shop}/admin/oauth/access_token"
        logger.info("Exchanging code for access token — shop=%s url=%s", shop, token_url)

        token_payload = {
            "client_id": settings.shopify_api_key,
            "client_secret": settings.shopify_api_secret,
            "code": code,
        }
        try:
            async with httpx.AsyncClient(timeout=20.0, transport=self._transport) as client:
                # Shopify requires application/x-www-form-urlencoded (not JSON)
                response = await client.post(
                    token_url,
                    data=token_payload,
                    headers={"Content-Type": "application/x-www-form-urlencoded",
                             "Accept": "application/json"},
                )
        except httpx.RequestError as exc:
            logger.error("Token exchange unreachable — shop=%s error=%s", shop, exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Could not reach Shopify for token exchange.",
            )

        logger.debug("Token exchange response — shop=%s http_status=%d", shop, response.status_code)

        if response.status_code >= 400:
            logger.error(
                "Token exchange failed — shop=%s http_status=%d body=%.200s",
                shop,
                response.status_code,
                response.text,
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Token exchange failed with status {response.status_code}.",
            )

        access_token = response.json().get("access_token")
        if not access_token:
            logger.error("Token exchange succeeded but access_token missing in response — shop=%s", shop)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Failed to obtain access token",
            )
        return access_token


shopify_auth_service = ShopifyAuthService()
