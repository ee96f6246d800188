"""Domain normalization - turn whatever the user typed into a bare hostname.

Users paste all sorts of things into the scan box:

    "https://www.Example.com/contact"
    "example.com"
    "HTTP://example.com/"

All of these should scan the same host. Every probe resolves the
normalized name, so this runs before anything touches the network.
"""

import re
import logging

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r'^https?://', re.IGNORECASE)
_WWW_RE = re.compile(r'^www\.', re.IGNORECASE)


class InvalidDomain(ValueError):
    """Raised when nothing usable is left after normalization.

    This is the only error that aborts a scan.
    """

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Invalid domain: {raw!r}")


def normalize_domain(raw: str) -> str:
    """Normalize a raw user string to a bare hostname.

    Steps, in order:
      1. Strip surrounding whitespace
      2. Strip an http:// or https:// prefix (case-insensitive)
      3. Strip one leading 'www.'
      4. Truncate at the first '/'
      5. Lowercase

    Examples:
        normalize_domain("https://www.Example.com/about") -> "example.com"
        normalize_domain("shop.example.com") -> "shop.example.com"

    Raises InvalidDomain if the result is empty.
    """
    if not isinstance(raw, str):
        raise InvalidDomain(str(raw))

    domain = raw.strip()
    domain = _SCHEME_RE.sub('', domain)
    domain = _WWW_RE.sub('', domain)
    domain = domain.split('/', 1)[0]
    domain = domain.strip().lower()

    if not domain:
        raise InvalidDomain(raw)

    if domain != raw:
        logger.debug(f"Normalized {raw!r} -> {domain!r}")

    return domain
