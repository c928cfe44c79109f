import re

_SHOP_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9\-]*\.myshopify\.com$")


def is_valid_shop_domain(shop: str) -> bool:
    """True for bare ``<store>.myshopify.com`` domains (no scheme, no path)."""
    return bool(shop) and bool(_SHOP_DOMAIN_RE.match(shop))


def mask_token(token: str | None) -> str:
    if not token:
        return "(none)"
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}...{token[-4:]}"
