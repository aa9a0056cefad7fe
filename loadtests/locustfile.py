"""Storefront load testing: Locust entry point.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Shoppers only:
    locust -f loadtests/locustfile.py CheckoutUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py CheckoutUser OrderAdminUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time
from collections import Counter

from locust import events

from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.admin import OrderAdminUser  # noqa: F401
from loadtests.scenarios.checkout import CheckoutUser  # noqa: F401

logger = logging.getLogger("loadtest")

# (status code, request name, error message) -> occurrences
failures: Counter = Counter()


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log and tally the API error message of every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
        failures[("EXC", name, str(exception))] += 1
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)
        failures[(response.status_code, name, detail)] += 1


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    failures.clear()
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')} against {environment.host}\n")


@events.test_stop.add_listener
def on_test_stop(**_kwargs):
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    if failures:
        print("[LOADTEST] Most frequent errors:")
        for (status, name, detail), count in failures.most_common(10):
            print(f"  {count:>6}  [{status}] {name}: {detail}")
    print()
