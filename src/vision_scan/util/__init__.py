"""Shared helpers: types, config, logging, time and I/O."""
