"""ChronoShop Load Testing: Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Checkout only:
    locust -f loadtests/locustfile.py ShopperUser AdminReviewUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.scenarios.careers import ApplicantUser  # noqa: F401
from loadtests.scenarios.storefront import AdminReviewUser, ShopperUser  # noqa: F401

logger = logging.getLogger("loadtest")


def extract_error_detail(response) -> str:
    """Compact error text from a ``{"error": ...}`` body or a pydantic 422 body."""
    try:
        body = response.json()
    except ValueError:
        return (getattr(response, "text", "") or "")[:300] or "(empty response body)"

    if isinstance(body.get("detail"), list):
        return " | ".join(
            f"{'.'.join(str(p) for p in err.get('loc', []))}: {err.get('msg', err)}" for err in body["detail"]
        )

    error = body.get("error", body)
    if isinstance(error, dict):
        return " | ".join(f"{k}: {v}" for k, v in error.items())
    return str(error)[:300]


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, extract_error_detail(response))


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}\n")


@events.test_stop.add_listener
def on_test_stop(**_kwargs):
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}\n")
