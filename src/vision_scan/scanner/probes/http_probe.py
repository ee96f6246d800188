"""HTTP audit probe - one live GET, then look at the protections.

Collects the response headers for the security-header audit and the
body for passive platform fingerprinting. Redirects are followed so a
www <-> apex hop at the server lands us on the real page.
"""

import asyncio
import logging
from typing import Dict

import aiohttp

from vision_scan.util.types import ProbeOutcome, HTTPAudit, HeaderAuditState, DEFAULT_USER_AGENT
from vision_scan.util.time import now_utc, duration_ms

logger = logging.getLogger(__name__)


class HTTPAuditProbe:
    """Async HTTPS client for the header audit.

    A fresh aiohttp session per probe: no connection pooling across scans
    and no cached responses, every audit sees the live server.
    Edge firewalls often drop unlabeled clients, so we send a browser user-agent.
    """

    def __init__(self, timeout: float = 10.0, user_agent: str = DEFAULT_USER_AGENT):
        """Initialize HTTP probe with total request timeout and user-agent."""
        self.timeout = timeout
        self.user_agent = user_agent

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={
                'User-Agent': self.user_agent,
                'Cache-Control': 'no-cache',
                'Pragma': 'no-cache',
            }
        )

    async def probe(self, fqdn: str) -> ProbeOutcome:
        """GET https://<fqdn>/ and audit the final response.

        Returns ProbeOutcome with:
          - success, data=HTTPAudit(headers_state, body, headers)
          - timeout if the request didn't finish in time
          - failure on any transport error
        """
        start = now_utc()
        url = f"https://{fqdn}"

        try:
            async with self._session() as session:
                async with session.get(url, allow_redirects=True) as resp:
                    body = await resp.text(errors='replace')
                    headers: Dict[str, str] = {name.lower(): value for name, value in resp.headers.items()}

                    logger.debug(f"HTTP {resp.status} from {resp.url} ({len(body)} bytes)")

                    audit = HTTPAudit(
                        headers_state=HeaderAuditState.from_headers(headers),
                        body=body,
                        headers=headers,
                    )
                    return ProbeOutcome.success(fqdn, 'http', audit, duration_ms(start))

        except asyncio.TimeoutError:
            logger.debug(f"HTTP timeout for {url}")
            return ProbeOutcome.timeout(fqdn, 'http', duration_ms(start))

        except aiohttp.ClientError as e:
            logger.debug(f"HTTP error for {url}: {e}")
            return ProbeOutcome.failure(fqdn, 'http', f"HTTP error: {type(e).__name__}", duration_ms(start))

        except Exception as e:
            logger.warning(f"Unexpected error probing {url}: {e}")
            return ProbeOutcome.failure(fqdn, 'http', f"Unexpected error: {e}", duration_ms(start))
