"""Scan orchestrator - runs every probe for one domain and scores the result.

This is where all the pieces come together:
1. Normalize the domain (the only step that can abort a scan)
2. Fan out: five port probes plus TLS, DNS and HTTP, all concurrently
3. Fan in: wait for every probe to settle, success or not
4. Score the outcomes into one ScanReport

A probe failing or timing out never cancels its siblings. Nothing is
shared between scans, so any number can run at once.
"""

import asyncio
from typing import Awaitable, Optional, Tuple

from vision_scan.util.types import ScanConfig, ScanReport, ProbeOutcome, PortFinding, PortService
from vision_scan.util.time import now_utc, duration_ms
from vision_scan.util.log import get_logger
from vision_scan.scanner.normalization import normalize_domain
from vision_scan.scanner.probes.port_probe import PortProbe, PORT_CATALOG
from vision_scan.scanner.probes.tls_probe import TLSProbe
from vision_scan.scanner.probes.dns_probe import DNSPolicyProbe
from vision_scan.scanner.probes.http_probe import HTTPAuditProbe
from vision_scan.scanner.scoring.model import Scorer, ScanOutcomes

logger = get_logger(__name__)


class ScanOrchestrator:
    """Coordinates the probes for a single-domain posture scan.

    Probes can be injected (tests pass fakes for a deterministic network);
    otherwise they are built from the config timeouts.
    """

    def __init__(self,
                 config: Optional[ScanConfig] = None,
                 port_probe: Optional[PortProbe] = None,
                 tls_probe: Optional[TLSProbe] = None,
                 dns_probe: Optional[DNSPolicyProbe] = None,
                 http_probe: Optional[HTTPAuditProbe] = None,
                 port_catalog: Tuple[PortService, ...] = PORT_CATALOG):
        """Initialize orchestrator with configuration and optional probe overrides."""
        self.config = config or ScanConfig()
        self.port_probe = port_probe or PortProbe(timeout=self.config.port_timeout)
        self.tls_probe = tls_probe or TLSProbe(timeout=self.config.tls_timeout)
        self.dns_probe = dns_probe or DNSPolicyProbe(timeout=self.config.dns_timeout)
        self.http_probe = http_probe or HTTPAuditProbe(
            timeout=self.config.http_timeout,
            user_agent=self.config.user_agent
        )
        self.port_catalog = port_catalog
        self.scorer = Scorer()

    async def scan(self, raw_domain: str) -> ScanReport:
        """Run a full scan and return the report.

        Raises InvalidDomain if the input normalizes to nothing.
        Every other failure ends up as an issue line in the report.
        """
        domain = normalize_domain(raw_domain)
        start = now_utc()
        logger.info(f"Starting posture scan for {domain}")

        ports, tls, dns, http = await asyncio.gather(
            self._probe_ports(domain),
            self._guard(self.tls_probe.probe(domain), domain, 'tls'),
            self._guard(self.dns_probe.probe(domain), domain, 'dns'),
            self._guard(self.http_probe.probe(domain), domain, 'http'),
        )

        logger.debug(f"Probes settled for {domain} in {duration_ms(start):.0f}ms: "
                     f"{[outcome.to_dict() for outcome in (tls, dns, http)]}")

        report = self.scorer.score(ScanOutcomes(domain=domain, ports=ports, tls=tls, dns=dns, http=http))

        logger.info(f"Scan complete for {domain}: score {report.score} "
                    f"({duration_ms(start) / 1000:.1f}s)")
        return report

    async def _probe_ports(self, domain: str) -> Tuple[PortFinding, ...]:
        """Probe the whole catalog concurrently.

        gather() returns results in argument order, so findings stay in
        catalog order no matter which connect finishes first.
        """
        results = await asyncio.gather(
            *(self.port_probe.check(domain, service) for service in self.port_catalog),
            return_exceptions=True
        )

        findings = []
        for service, result in zip(self.port_catalog, results):
            if isinstance(result, Exception):
                logger.error(f"Error probing {domain}:{service.port}: {result}")
                result = PortFinding(service.port, service.service_name, service.risk_tier, is_open=False)
            findings.append(result)

        return tuple(findings)

    async def _guard(self, probe: Awaitable[ProbeOutcome], domain: str, probe_type: str) -> ProbeOutcome:
        """Await a probe, turning anything it failed to catch into a Failure outcome."""
        try:
            return await probe
        except Exception as e:
            logger.error(f"Error in {probe_type} probe for {domain}: {e}")
            return ProbeOutcome.failure(domain, probe_type, str(e))


def scan_domain(raw_domain: str, config: Optional[ScanConfig] = None) -> ScanReport:
    """Synchronous entry point: run one scan on a fresh event loop."""
    return asyncio.run(ScanOrchestrator(config).scan(raw_domain))
