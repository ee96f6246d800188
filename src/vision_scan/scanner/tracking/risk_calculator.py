"""
Risk Calculator
===============
Turns a posture score into an estimated breach cost for the prospect
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class IndustryProfile:
    """Cost baseline for one industry"""
    base_cost: int
    # Kept for the data model; not part of the loss formula
    risk_multiplier: float


INDUSTRY_DATA: Mapping[str, IndustryProfile] = MappingProxyType({
    'marketing': IndustryProfile(base_cost=4_500_000, risk_multiplier=1.2),
    'finance': IndustryProfile(base_cost=5_600_000, risk_multiplier=1.5),
    'retail': IndustryProfile(base_cost=2_000_000, risk_multiplier=1.0),
    'manufacturing': IndustryProfile(base_cost=1_500_000, risk_multiplier=0.9),
    'other': IndustryProfile(base_cost=1_000_000, risk_multiplier=1.0),
})

INDUSTRIES = tuple(INDUSTRY_DATA.keys())


def size_factor(employee_count: int) -> float:
    """Share of the industry baseline a company of this size is exposed to"""
    if employee_count < 10:
        return 0.002
    if employee_count < 50:
        return 0.005
    return 0.015


def estimate_loss(industry: str, employee_count: int, score: int) -> int:
    """
    Estimate breach cost from industry, headcount and posture score

    Unknown industries fall back to 'other'. The result is rounded up
    to the nearest 100.

    Raises:
        ValueError: score outside 0-100
    """
    if not 0 <= score <= 100:
        raise ValueError(f"score must be between 0 and 100, got {score}")

    profile = INDUSTRY_DATA.get(industry, INDUSTRY_DATA['other'])
    vulnerability_factor = (100 - score) / 100
    estimated = profile.base_cost * size_factor(employee_count) * vulnerability_factor

    return math.ceil(estimated / 100) * 100
