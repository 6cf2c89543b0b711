from urllib.parse import urlparse

_IMAGE_HOSTS = (
    "images.unsplash.com",
    "bstatic.com",
    "muscache.com",
    "trvl-media.com",
    "tripadvisor.com",
    "priceline.com",
    "pclncdn.com",
    "kiwi.com",
    "amadeus.com",
)
_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif", ".avif")

_PLACEHOLDERS = {
    "paris": "https://images.unsplash.com/photo-1502602898657-3e91760cbb34",
    "abidjan": "https://images.unsplash.com/photo-1590523277543-a94d2e4eb00b",
    "dakar": "https://images.unsplash.com/photo-1578662996442-48f60103fc96",
    "dubai": "https://images.unsplash.com/photo-1512453979798-5ea266f8880c",
    "london": "https://images.unsplash.com/photo-1513635269975-59663e0ac1ad",
    "londres": "https://images.unsplash.com/photo-1513635269975-59663e0ac1ad",
}
DEFAULT_PLACEHOLDER = "https://images.unsplash.com/photo-1566073771259-6a8506099945"
CAR_PLACEHOLDER = "https://images.unsplash.com/photo-1549317661-bd32c8ce0db2"

AIRLINE_LOGO_URL = "https://images.kiwi.com/airlines/64/{code}.png"


def is_valid_image_url(url: object) -> bool:
    """Accept absolute http(s) URLs on a known image host or with an image extension.

    Anything mentioning "placeholder" is rejected so provider stock
    placeholders get replaced with our own.
    """
    if not isinstance(url, str):
        return False
    url = url.strip()
    if not url or "placeholder" in url.lower():
        return False
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    host = parsed.hostname or ""
    if any(host == h or host.endswith("." + h) for h in _IMAGE_HOSTS):
        return True
    return parsed.path.lower().endswith(_IMAGE_EXTENSIONS)


def placeholder_image(location: str | None) -> str:
    city = (location or "").lower()
    for key, url in _PLACEHOLDERS.items():
        if key in city:
            return url
    return DEFAULT_PLACEHOLDER


def airline_logo(code: str) -> str:
    return AIRLINE_LOGO_URL.format(code=code.upper())


def pick_images(candidates: list[object], fallback: str, limit: int = 5) -> list[str]:
    images: list[str] = []
    for candidate in candidates:
        if is_valid_image_url(candidate) and candidate.strip() not in images:
            images.append(candidate.strip())
        if len(images) >= limit:
            break
    return images or [fallback]
