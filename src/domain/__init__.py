"""Domain types for the currency converter.

Rate snapshots, conversion results and the error taxonomy live here so that
the HTTP client, the cache and the CLI share one vocabulary without
depending on each other.
"""

__all__ = [
    "errors",
    "rates",
]
