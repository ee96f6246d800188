"""Port probe - is a risky service reachable from the internet?

A single timed TCP connect per port. No banner grabbing, no retries:
one attempt is authoritative, and anything other than a clean connect
counts as closed (probably filtered).
"""

import asyncio
import logging
from typing import Tuple

from vision_scan.util.types import ProbeOutcome, PortService, PortFinding, RiskTier
from vision_scan.util.time import now_utc, duration_ms

logger = logging.getLogger(__name__)


# Fixed catalog, in report order
PORT_CATALOG: Tuple[PortService, ...] = (
    PortService(21, "FTP", RiskTier.HIGH),
    PortService(22, "SSH", RiskTier.MEDIUM),
    PortService(3389, "RDP", RiskTier.CRITICAL),
    PortService(3306, "MySQL", RiskTier.CRITICAL),
    PortService(5432, "PostgreSQL", RiskTier.CRITICAL),
)


class PortProbe:
    """Async TCP connect check.

    Each call opens and closes its own connection - nothing is pooled
    or shared between probes.
    """

    def __init__(self, timeout: float = 2.5):
        """Initialize port probe with connect timeout in seconds."""
        self.timeout = timeout

    async def probe(self, fqdn: str, port: int) -> ProbeOutcome:
        """Attempt one TCP connection.

        Returns ProbeOutcome with:
          - success, data=True if the port accepted the connection (OPEN)
          - timeout if nothing answered in time
          - failure for refused / unreachable / resolution errors
        """
        start = now_utc()
        target = f"{fqdn}:{port}"

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(fqdn, port),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.debug(f"Port timeout for {target}")
            return ProbeOutcome.timeout(target, 'port', duration_ms(start))
        except OSError as e:
            # Refused, unreachable, DNS failure - all mean "not open" for scoring
            logger.debug(f"Port closed for {target}: {e}")
            return ProbeOutcome.failure(target, 'port', f"Connect error: {e}", duration_ms(start))

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error closing connection to {target}: {e}")

        logger.debug(f"Port open for {target}")
        return ProbeOutcome.success(target, 'port', True, duration_ms(start))

    async def check(self, fqdn: str, service: PortService) -> PortFinding:
        """Probe one catalog entry and turn the outcome into a finding."""
        outcome = await self.probe(fqdn, service.port)
        return PortFinding(
            port=service.port,
            service_name=service.service_name,
            risk_tier=service.risk_tier,
            is_open=outcome.ok and bool(outcome.data),
        )
