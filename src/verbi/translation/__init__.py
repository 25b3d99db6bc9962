"""Diffing, caching, batching and validation of translations."""
