"""Playground lifecycle load testing: Locust entry point.

The target server must run with IDENTITY_RESOLVER=jwt and the JWT_SECRET
the generators sign with.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Contention on scarce stock only:
    locust -f loadtests/locustfile.py ScarceStockUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py OrderUser InstallationUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.data_generators import bearer
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.installation import InstallationUser  # noqa: F401
from loadtests.scenarios.ordering import OrderUser, ScarceStockUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the order and installation overviews when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    if not environment.host:
        return
    admin = bearer("admin-lt", "admin")
    for path in ("/orders/stats/overview", "/installations/stats/overview"):
        try:
            resp = requests.get(f"{environment.host}{path}", headers=admin, timeout=5)
            print(f"[LOADTEST] {path}: {resp.json().get('data')}")
        except requests.RequestException as e:
            print(f"[LOADTEST] Could not fetch {path}: {e}")
    print()
