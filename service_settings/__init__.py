"""Audited settings store for flag-edge."""
