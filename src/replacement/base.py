"""
Shared metrics for property replacement.

Counters and histograms are registered once on the default Prometheus
registry and labelled per destination or error type.
"""

from prometheus_client import Counter, Histogram

REPLACEMENTS_APPLIED = Counter(
    "property_replacements_total",
    "Total property values written by replacement rules",
    ["destination"],
)

REPLACEMENT_TIME = Histogram(
    "replacement_seconds",
    "Time to run a full replacement over a property store",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
)

REPLACEMENT_ERRORS = Counter(
    "replacement_errors_total",
    "Replacement errors contained or raised by the pipeline",
    ["error_type"],
)
