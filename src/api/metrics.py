from prometheus_client import Counter, Histogram, Gauge, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # If it already exists, retrieve it from the registry
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "tasker_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "tasker_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

EXTRACTIONS_TOTAL = get_or_create_metric(
    "tasker_extractions_total",
    "Tasks extracted, by strategy that produced them",
    Counter,
    labelnames=["strategy"],
)

FALLBACK_TOTAL = get_or_create_metric(
    "tasker_fallback_total",
    "Times the rule-based parser replaced the model, by failure reason",
    Counter,
    labelnames=["reason"],
)

TASKS_STORED = get_or_create_metric(
    "tasker_tasks_stored", "Tasks currently held in memory", Gauge
)
