"""
Unit Tests for the Deduction Scoring Model
"""

import itertools

import pytest

from vision_scan.scanner.probes.port_probe import PORT_CATALOG
from vision_scan.scanner.scoring.model import (
    Scorer,
    ScanOutcomes,
    dns_findings,
    header_findings,
    port_findings,
    tls_findings,
)
from vision_scan.util.types import PortFinding, ProbeOutcome

from fakes import dns_ok, http_ok, tls_ok


def ports(*open_ports):
    return tuple(
        PortFinding(s.port, s.service_name, s.risk_tier, is_open=s.port in open_ports)
        for s in PORT_CATALOG
    )


def outcomes(open_ports=(), tls=None, dns=None, http=None):
    return ScanOutcomes(
        domain='example.com',
        ports=ports(*open_ports),
        tls=tls or tls_ok(),
        dns=dns or dns_ok(),
        http=http or http_ok(),
    )


class TestPortFindings:
    """Test suite for port deductions"""

    def test_no_open_ports_is_one_pass(self):
        findings = port_findings(ports())
        assert len(findings) == 1
        assert findings[0].passed
        assert 'FTP, SSH, RDP, MySQL, PostgreSQL' in findings[0].message

    def test_critical_costs_twenty_other_costs_ten(self):
        findings = port_findings(ports(21, 22, 3389))
        assert [f.deduction for f in findings] == [10, 10, 20]
        assert not any(f.passed for f in findings)

    def test_issue_names_port_and_service(self):
        findings = port_findings(ports(3306))
        assert findings[0].message.startswith('Port 3306 (MySQL)')


class TestTLSFindings:
    """Test suite for certificate deductions"""

    def test_missing_certificate(self):
        findings = tls_findings(ProbeOutcome.failure('example.com:443', 'tls', 'SSL error'))
        assert findings[0].deduction == 20

    def test_timeout_counts_as_missing(self):
        findings = tls_findings(ProbeOutcome.timeout('example.com:443', 'tls'))
        assert findings[0].deduction == 20

    @pytest.mark.parametrize('days, deduction', [(-5, 20), (0, 20), (1, 10), (14, 10), (15, 0)])
    def test_expiry_thresholds(self, days, deduction):
        findings = tls_findings(tls_ok(days=days))
        assert findings[0].deduction == deduction

    def test_last_day_is_worded_as_today(self):
        finding = tls_findings(tls_ok(days=0))[0]
        assert finding.message == "SSL Certificate expires today"
        assert finding.deduction == 20
        assert not finding.passed

    def test_expired_cites_days_ago(self):
        finding = tls_findings(tls_ok(days=-3))[0]
        assert finding.message == "SSL Certificate has expired (3 days ago)"

    def test_valid_pass_cites_days_and_issuer(self):
        finding = tls_findings(tls_ok(days=60, issuer='DigiCert Inc'))[0]
        assert finding.passed
        assert '60 days remaining' in finding.message
        assert 'DigiCert Inc' in finding.message


class TestDNSFindings:
    """Test suite for SPF / DMARC deductions"""

    def test_strong_policy_passes(self):
        findings = dns_findings(dns_ok())
        assert all(f.passed for f in findings)
        assert len(findings) == 2

    def test_permissive_spf_is_single_issue(self):
        findings = dns_findings(dns_ok(spf_permissive=True))
        spf = [f for f in findings if 'SPF' in f.message]
        assert len(spf) == 1
        assert spf[0].deduction == 20
        assert 'anyone' in spf[0].message

    def test_absent_and_permissive_never_stack(self):
        findings = dns_findings(dns_ok(spf_present=False, spf_permissive=True))
        assert sum(f.deduction for f in findings if 'SPF' in f.message) == 20

    def test_missing_spf(self):
        findings = dns_findings(dns_ok(spf_present=False))
        assert findings[0].message.startswith('Missing SPF')
        assert findings[0].deduction == 20

    @pytest.mark.parametrize('state, deduction', [
        (dict(dmarc_present=False), 30),
        (dict(dmarc_monitor_only=True), 10),
    ])
    def test_dmarc(self, state, deduction):
        dmarc = dns_findings(dns_ok(**state))[1]
        assert 'DMARC' in dmarc.message
        assert dmarc.deduction == deduction

    def test_lookup_failure_is_one_free_issue(self):
        findings = dns_findings(ProbeOutcome.failure('example.com', 'dns', 'DNS error'))
        assert len(findings) == 1
        assert findings[0].message == 'DNS Lookup failed'
        assert findings[0].deduction == 0


class TestHeaderFindings:
    """Test suite for header deductions"""

    def test_all_missing(self):
        findings = header_findings(http_ok(headers={}))
        assert [f.deduction for f in findings] == [10, 5, 5]

    def test_csp_frame_ancestors_counts_as_frame_protection(self):
        findings = header_findings(http_ok(headers={
            'strict-transport-security': 'max-age=1',
            'x-content-type-options': 'nosniff',
            'content-security-policy': "default-src 'self'; frame-ancestors 'none'",
        }))
        assert all(f.passed for f in findings)

    def test_csp_without_frame_ancestors_does_not(self):
        findings = header_findings(http_ok(headers={'content-security-policy': "default-src 'self'"}))
        assert findings[2].deduction == 5

    def test_failed_audit_omits_header_checks(self):
        findings = header_findings(ProbeOutcome.failure('example.com', 'http', 'HTTP error'))
        assert len(findings) == 1
        assert findings[0].deduction == 0
        assert not findings[0].passed


class TestScorer:
    """Test suite for the full fold"""

    @pytest.fixture
    def scorer(self):
        return Scorer()

    def test_perfect_scan(self, scorer):
        report = scorer.score(outcomes())
        assert report.score == 100
        assert report.issues == ()
        assert len(report.passes) == 7

    def test_phase_order(self, scorer):
        report = scorer.score(outcomes(open_ports=(22,), dns=dns_ok(dmarc_present=False), http=http_ok(headers={})))
        assert report.issues[0].startswith('Port 22')
        assert 'DMARC' in report.issues[1]
        assert 'HSTS' in report.issues[2]

    def test_worst_case_floors_at_zero(self, scorer):
        report = scorer.score(outcomes(
            open_ports=tuple(s.port for s in PORT_CATALOG),
            tls=ProbeOutcome.timeout('example.com:443', 'tls'),
            dns=dns_ok(spf_permissive=True, dmarc_present=False),
            http=http_ok(headers={}),
        ))
        assert report.score == 0
        assert len(report.issues) == 5 + 1 + 2 + 3

    def test_score_bounded_for_every_combination(self, scorer):
        tls_cases = [tls_ok(), tls_ok(days=3), tls_ok(days=-1), ProbeOutcome.timeout('x', 'tls')]
        dns_cases = [dns_ok(), dns_ok(spf_present=False, dmarc_present=False),
                     dns_ok(spf_permissive=True, dmarc_monitor_only=True),
                     ProbeOutcome.failure('x', 'dns', 'boom')]
        http_cases = [http_ok(), http_ok(headers={}), ProbeOutcome.failure('x', 'http', 'boom')]
        port_cases = [(), (21,), (3389, 3306, 5432), tuple(s.port for s in PORT_CATALOG)]

        for open_ports, tls, dns, http in itertools.product(port_cases, tls_cases, dns_cases, http_cases):
            report = scorer.score(outcomes(open_ports, tls, dns, http))
            assert 0 <= report.score <= 100

    def test_cms_detected_from_body(self, scorer):
        report = scorer.score(outcomes(http=http_ok(body='<LINK HREF="/WP-CONTENT/themes/a.css">')))
        assert report.cms == 'wordpress'

    def test_cms_none_when_audit_failed(self, scorer):
        report = scorer.score(outcomes(http=ProbeOutcome.timeout('example.com', 'http')))
        assert report.cms is None

    def test_degraded_scan_scores_only_completed_checks(self, scorer):
        report = scorer.score(outcomes(http=ProbeOutcome.failure('example.com', 'http', 'blocked')))
        assert report.score == 100
        assert len(report.issues) == 1
