"""Passive platform fingerprinting from one HTML response.

No extra requests - we only look at the page and headers the HTTP
audit already fetched. Signatures are checked in order and the first
match wins; in practice they don't overlap.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformSignature:
    """Markers that identify one platform.

    body_markers: substrings of the lowercased HTML
    header_markers: (header name, substring of value) pairs; empty value = header present
    """
    platform: str
    body_markers: Tuple[str, ...]
    header_markers: Tuple[Tuple[str, str], ...] = ()


SIGNATURES: Tuple[PlatformSignature, ...] = (
    PlatformSignature(
        platform='wordpress',
        body_markers=('/wp-content/', '/wp-includes/', 'wp-json', 'wp-block-', 'wpadminbar'),
        header_markers=(('x-powered-by', 'wp engine'), ('x-pingback', '')),
    ),
    PlatformSignature(
        platform='shopify',
        body_markers=('cdn.shopify.com', 'window.shopify', 'shopify.theme', 'shopify-section'),
    ),
    PlatformSignature(
        platform='squarespace',
        body_markers=('static1.squarespace.com', 'squarespace_context'),
        header_markers=(('server', 'squarespace'),),
    ),
    PlatformSignature(
        platform='wix',
        body_markers=('static.wixstatic.com', 'wix.com', 'wix-warmup-data'),
        header_markers=(('x-wix-request-id', ''),),
    ),
    PlatformSignature(
        platform='joomla',
        body_markers=('joomla', '/media/system/css/'),
    ),
    PlatformSignature(
        platform='drupal',
        body_markers=('drupal', '/sites/default/files'),
    ),
)


def _matches(signature: PlatformSignature, html: str, headers: Mapping[str, str]) -> bool:
    if any(marker in html for marker in signature.body_markers):
        return True
    for name, needle in signature.header_markers:
        value = headers.get(name)
        if value is not None and needle in value:
            return True
    return False


def identify(html: str, headers: Mapping[str, str]) -> Optional[str]:
    """Return the platform identifier for a page, or None.

    html is expected lowercased already; headers are normalized here
    (names and values compared case-insensitively).
    """
    html = html or ''
    normalized = {name.lower(): str(value).lower() for name, value in (headers or {}).items()}

    for signature in SIGNATURES:
        if _matches(signature, html, normalized):
            logger.debug(f"Fingerprint matched {signature.platform}")
            return signature.platform

    return None
