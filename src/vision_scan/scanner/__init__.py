"""Scan engine: normalization, probes, fingerprinting, scoring and orchestration."""
