"""
Recommendation Engine
=====================
Static advice attached to scan results:
- a platform advisory keyed by the detected CMS
- copy-paste DNS fixes for SPF / DMARC issues
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class DNSRemediation:
    """A DNS record the customer can add, with install guidance"""
    title: str
    record_type: str
    code: str
    explanation: str
    steps: Tuple[str, ...]


UNKNOWN_PLATFORM = 'unknown'

ADVISORIES: Mapping[str, str] = MappingProxyType({
    'wordpress': (
        "WordPress powers a large share of the web, which makes it the most targeted CMS. "
        "Most compromises come through outdated plugins and themes rather than the core. "
        "Keep core, plugins and themes on automatic updates, remove anything unused, "
        "and put the login page behind MFA."
    ),
    'shopify': (
        "Shopify runs the hosting and patching for you, so the main risk is account takeover. "
        "Enforce two-step authentication for every staff account, review third-party app "
        "permissions regularly, and remove apps you no longer use."
    ),
    'squarespace': (
        "Squarespace is a managed platform, so server patching is handled for you. "
        "Protect the account itself: enable two-factor login for all contributors "
        "and review who still has admin access."
    ),
    'wix': (
        "Wix manages the platform and certificates. The exposure is in the account and "
        "connected apps: turn on two-step verification, limit site collaborators, "
        "and audit installed apps for data access."
    ),
    'joomla': (
        "Joomla sites are frequently targeted through outdated extensions. "
        "Apply core and extension updates promptly, remove unused extensions, "
        "and restrict access to the administrator panel."
    ),
    'drupal': (
        "Drupal has had high-impact remote code execution bugs in the past. "
        "Subscribe to Drupal security advisories, patch core quickly when releases land, "
        "and keep contributed modules to the minimum you need."
    ),
    UNKNOWN_PLATFORM: (
        "We could not identify the platform behind this website. Custom or heavily cached "
        "sites still need the basics: keep server software patched, keep an inventory "
        "of who can publish changes, and monitor for unexpected content."
    ),
})


def advisory_for(platform: Optional[str]) -> str:
    """Advisory paragraph for a detected platform, falling back to the unknown text"""
    key = (platform or UNKNOWN_PLATFORM).lower()
    return ADVISORIES.get(key, ADVISORIES[UNKNOWN_PLATFORM])


def _dmarc_fix(domain: str) -> DNSRemediation:
    return DNSRemediation(
        title='DMARC Implementation Guide',
        record_type='TXT Record',
        # admin@ is a placeholder the customer must change
        code=f"Host: _dmarc\nValue: v=DMARC1; p=none; rua=mailto:admin@{domain}",
        explanation=(
            "This record puts your email domain into 'Monitoring Mode'. It does not block any "
            "emails yet (so it is safe to install), but it will start sending you reports on "
            "who is sending email as your company."
        ),
        steps=(
            "Log in to your DNS Provider (e.g., GoDaddy, Cloudflare, Namecheap).",
            "Go to 'DNS Management' or 'Name Server Settings'.",
            "Add a new record: Select 'TXT' as the type.",
            "Paste '_dmarc' into the Host/Name field.",
            "Paste the code below into the Value/Content field.",
            "IMPORTANT: Change 'admin@...' to the actual IT email address where you want "
            "to receive security reports.",
            "Save. Changes can take up to 48 hours to propagate.",
        ),
    )


def _spf_fix() -> DNSRemediation:
    return DNSRemediation(
        title='SPF Record Template',
        record_type='TXT Record',
        code="Host: @\nValue: v=spf1 include:_spf.google.com include:spf.protection.outlook.com ~all",
        explanation=(
            "An SPF record is like an ID card for your email. It lists exactly which services "
            "are allowed to send email for you. This template authorizes Google and Outlook, "
            "which covers most businesses."
        ),
        steps=(
            "Log in to your DNS Provider.",
            "Go to 'DNS Management'.",
            "Add a new record: Select 'TXT' as the type.",
            "Type '@' into the Host/Name field (or leave it blank if required).",
            "Paste the code below into the Value field.",
            "IMPORTANT: If you use Mailchimp, HubSpot, or other tools, ask your IT team to "
            "add them to this list before saving.",
        ),
    )


def remediation_for_issue(issue: str, domain: str) -> Optional[DNSRemediation]:
    """DNS fix for an issue line, or None if the issue has no DNS remediation.

    DMARC is checked first: its wording never mentions SPF.
    """
    if 'DMARC' in issue:
        return _dmarc_fix(domain)
    if 'SPF' in issue:
        return _spf_fix()
    return None
