"""
Post-scan collaborators: loss estimate and remediation advice
"""

from .risk_calculator import estimate_loss, INDUSTRY_DATA, IndustryProfile
from .recommendation_engine import advisory_for, remediation_for_issue, DNSRemediation

__all__ = [
    'estimate_loss',
    'INDUSTRY_DATA',
    'IndustryProfile',
    'advisory_for',
    'remediation_for_issue',
    'DNSRemediation',
]
