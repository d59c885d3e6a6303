"""Infrastructure: security, cache and persistence adapters."""
