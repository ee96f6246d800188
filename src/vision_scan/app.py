"""Command line entrypoint - scan one domain and print the report.

Configuration comes from .env / environment (see util.env); the domain
can be given on the command line or as DOMAIN in .env.

Exit codes:
  0 - scan completed (the score may still be terrible)
  2 - the domain was unusable, nothing was scanned
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from vision_scan.util.env import load_config
from vision_scan.util.io import write_json
from vision_scan.util.log import setup_logging
from vision_scan.scanner.normalization import InvalidDomain, normalize_domain
from vision_scan.scanner.runner import scan_domain
from vision_scan.scanner.tracking.risk_calculator import estimate_loss, INDUSTRIES
from vision_scan.scanner.tracking.recommendation_engine import advisory_for, remediation_for_issue

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_DOMAIN = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Non-intrusive external security posture scan.")
    p.add_argument("domain", nargs="?", help="domain or URL to scan (defaults to DOMAIN from .env)")
    p.add_argument("--industry", choices=INDUSTRIES, help="industry for the breach cost estimate")
    p.add_argument("--employees", type=int, default=5, help="employee count for the estimate (default 5)")
    p.add_argument("--output", "-o", type=Path, help="also write the JSON report to this file")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def build_output(domain: str, report, industry: Optional[str], employees: int) -> dict:
    """Report plus the advice a presenter needs to tell the story."""
    output = report.to_dict()
    output['domain'] = domain
    output['advisory'] = advisory_for(report.cms)

    fixes = []
    for issue in report.issues:
        fix = remediation_for_issue(issue, domain)
        if fix is not None:
            fixes.append({'issue': issue, 'title': fix.title, 'type': fix.record_type,
                          'code': fix.code, 'explanation': fix.explanation, 'steps': list(fix.steps)})
    output['dns_fixes'] = fixes

    if industry:
        output['estimated_loss'] = estimate_loss(industry, employees, report.score)

    return output


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level))

    config = load_config()
    raw_domain = args.domain or config.domain or ""

    # scan_domain normalizes on its own; normalize once here for the report label
    try:
        domain = normalize_domain(raw_domain)
        report = scan_domain(raw_domain, config)
    except InvalidDomain as e:
        logger.error(f"Scan aborted: {e}")
        return EXIT_INVALID_DOMAIN

    output = build_output(domain, report, args.industry, args.employees)

    if args.output:
        write_json(args.output, output)
        logger.info(f"Report written to {args.output}")

    print(json.dumps(output, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
