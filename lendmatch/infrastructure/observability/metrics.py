"""Prometheus metrics for monitoring match rates, assistant fallbacks, and partner imports"""

from prometheus_client import Counter, Histogram

# Matching metrics
ranking_counter = Counter(
    "lendmatch_ranking_total",
    "Partner rankings computed for leads",
    ["outcome"],  # matched | no_match
)

top_score_histogram = Histogram(
    "lendmatch_top_match_score",
    "Best match score per ranking",
    buckets=[40, 50, 60, 70, 80, 90, 100],
)

# Assistant metrics
assistant_fallback_counter = Counter(
    "lendmatch_assistant_fallback_total",
    "Remote assistant failures answered by the rule-based assistant",
    ["operation"],  # extract | reply
)

llm_latency_histogram = Histogram(
    "llm_request_latency_seconds",
    "Remote language model response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Partner import metrics
sheets_sync_counter = Counter(
    "lendmatch_sheets_sync_partners_total",
    "Partners processed by spreadsheet sync",
    ["result"],  # added | updated | unchanged
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ranking(match_count: int, top_score: int) -> None:
    """Record how often leads find partners and how strong the best fit is"""
    outcome = "matched" if match_count > 0 else "no_match"
    ranking_counter.labels(outcome=outcome).inc()

    if match_count > 0:
        top_score_histogram.observe(top_score)
