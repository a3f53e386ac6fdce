"""Merge gatekeeper: block merges until every CI job for a ref has passed."""

__version__ = "0.1.0"
