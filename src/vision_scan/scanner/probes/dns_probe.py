"""DNS policy probe - SPF and DMARC via TXT records.

These are DNS-based checks for email authentication. We query TXT
records at the apex (SPF) and at _dmarc.<domain> (DMARC) and only
look for the markers that matter for spoofing risk.

Negative answers are normal here: a domain without DMARC simply has
no _dmarc name. Those are "record absent", not errors.
"""

import asyncio
import logging
from typing import List, Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from vision_scan.util.types import ProbeOutcome, DNSPolicyState
from vision_scan.util.time import now_utc, duration_ms

logger = logging.getLogger(__name__)

# Answers that mean "no such record" rather than "DNS is broken"
NEGATIVE_ANSWERS = (
    dns.resolver.NXDOMAIN,
    dns.resolver.NoAnswer,
    dns.resolver.NoNameservers,
    dns.exception.Timeout,
)


def evaluate_policy(apex_txt: List[str], dmarc_txt: List[str]) -> DNSPolicyState:
    """Evaluate SPF and DMARC strength from raw TXT values.

    SPF: present if any value contains v=spf1, permissive if that record has +all.
    DMARC: present if any value contains v=DMARC1, monitor-only if it has p=none.
    """
    spf = next((r for r in apex_txt if 'v=spf1' in r), None)
    dmarc = next((r for r in dmarc_txt if 'v=DMARC1' in r), None)

    return DNSPolicyState(
        spf_present=spf is not None,
        spf_permissive=spf is not None and '+all' in spf,
        dmarc_present=dmarc is not None,
        dmarc_monitor_only=dmarc is not None and 'p=none' in dmarc,
    )


class DNSPolicyProbe:
    """Email authentication record checker.

    Uses dnspython's async resolver. A resolver can be injected (tests do);
    otherwise a fresh one is built per probe so scans share nothing.
    """

    def __init__(self, timeout: float = 4.0, resolver: Optional[dns.asyncresolver.Resolver] = None):
        """Initialize DNS probe with per-lookup timeout and optional resolver."""
        self.timeout = timeout
        self.resolver = resolver

    def _make_resolver(self) -> dns.asyncresolver.Resolver:
        resolver = dns.asyncresolver.Resolver()
        resolver.timeout = self.timeout
        resolver.lifetime = self.timeout
        return resolver

    async def _query_txt(self, resolver, name: str) -> List[str]:
        """Query TXT records for a name.

        Multi-string records are joined back together before matching.
        Returns [] for negative answers; other DNS errors propagate.
        """
        try:
            answers = await resolver.resolve(name, 'TXT')
        except NEGATIVE_ANSWERS as e:
            logger.debug(f"No TXT for {name}: {type(e).__name__}")
            return []

        records = []
        for rdata in answers:
            record = b''.join(rdata.strings).decode('utf-8', errors='replace').strip()
            if record:
                records.append(record)
        return records

    async def probe(self, domain: str) -> ProbeOutcome:
        """Check SPF and DMARC records for domain.

        Returns ProbeOutcome with:
          - success, data=DNSPolicyState (absent records are a normal success)
          - failure if the resolver itself is unusable
        """
        start = now_utc()

        try:
            resolver = self.resolver or self._make_resolver()

            apex_txt, dmarc_txt = await asyncio.gather(
                self._query_txt(resolver, domain),
                self._query_txt(resolver, f"_dmarc.{domain}"),
                return_exceptions=True
            )

            # Both lookups have settled; surface the first hard error
            for result in (apex_txt, dmarc_txt):
                if isinstance(result, BaseException):
                    raise result

            state = evaluate_policy(apex_txt, dmarc_txt)
            logger.debug(f"DNS policy for {domain}: {state}")
            return ProbeOutcome.success(domain, 'dns', state, duration_ms(start))

        except dns.exception.DNSException as e:
            logger.warning(f"DNS lookup failed for {domain}: {e}")
            return ProbeOutcome.failure(domain, 'dns', f"DNS error: {e}", duration_ms(start))
