import prometheus_client
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Guard against duplicated metric registration when the module is imported
# multiple times (for example, when running uvicorn with the reloader).
REQUEST_COUNT = getattr(prometheus_client, "role_editor_REQUEST_COUNT", None)
REQUEST_LATENCY = getattr(prometheus_client, "role_editor_REQUEST_LATENCY", None)
SELECTION_CHANGES = getattr(prometheus_client, "role_editor_SELECTION_CHANGES", None)
DRAFT_VALIDATIONS = getattr(prometheus_client, "role_editor_DRAFT_VALIDATIONS", None)
ROLE_SUBMISSIONS = getattr(prometheus_client, "role_editor_ROLE_SUBMISSIONS", None)

# Initialize all metrics if any are None
if REQUEST_COUNT is None:
    # HTTP Metrics
    REQUEST_COUNT = Counter(
        "http_requests_total", "Total HTTP requests", ["method", "endpoint", "http_status"]
    )
    REQUEST_LATENCY = Histogram(
        "http_request_latency_seconds", "HTTP request latency in seconds", ["method", "endpoint"]
    )

    # Editor Metrics
    SELECTION_CHANGES = Counter(
        "selection_changes_total",
        "Selection mutations that changed a role draft",
        ["operation"],  # toggle_permission/select_group/deselect_group/...
    )
    DRAFT_VALIDATIONS = Counter(
        "draft_validations_total",
        "Local role draft validations",
        ["result"],  # valid/invalid
    )
    ROLE_SUBMISSIONS = Counter(
        "role_submissions_total",
        "Role draft submissions handed to the role backend",
        ["mode", "result"],  # mode: create/update, result: success/rejected/invalid
    )

    # Register all metrics on the prometheus_client module
    prometheus_client.role_editor_REQUEST_COUNT = REQUEST_COUNT  # type: ignore[attr-defined]
    prometheus_client.role_editor_REQUEST_LATENCY = REQUEST_LATENCY  # type: ignore[attr-defined]
    prometheus_client.role_editor_SELECTION_CHANGES = SELECTION_CHANGES  # type: ignore[attr-defined]
    prometheus_client.role_editor_DRAFT_VALIDATIONS = DRAFT_VALIDATIONS  # type: ignore[attr-defined]
    prometheus_client.role_editor_ROLE_SUBMISSIONS = ROLE_SUBMISSIONS  # type: ignore[attr-defined]


def metrics_response():
    data = generate_latest()
    return data, CONTENT_TYPE_LATEST
