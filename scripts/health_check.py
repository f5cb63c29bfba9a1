#!/usr/bin/env python3
"""
Post-Deployment Health Check Script

This script validates that the deployed API is up and routing correctly.

Usage:
    python scripts/health_check.py --url <DEPLOYMENT_URL> --environment <staging|production>

Checks Performed:
    1. Health check endpoint (/api/health) returns 200 with status OK and a timestamp
    2. Catalog endpoint (/api/products) returns 200 (live or fallback data)
    3. Unknown paths return the JSON 404 body

Exit Codes:
    0: All health checks passed
    1: One or more health checks failed
"""

import argparse
import sys
import time
import requests
from typing import Dict, Tuple

NOT_FOUND_PROBE = "/api/__health-check-probe__"


def check_endpoint(url: str, endpoint: str, timeout: int = 10, expected_status: int = 200) -> Tuple[bool, str]:
    """
    Checks if an endpoint returns the expected HTTP status code.

    Args:
        url: Base deployment URL
        endpoint: Endpoint path to check
        timeout: Request timeout in seconds
        expected_status: Expected HTTP status code

    Returns:
        Tuple[bool, str]: (success, message)
    """
    full_url = f"{url.rstrip('/')}{endpoint}"

    try:
        response = requests.get(full_url, timeout=timeout, allow_redirects=True)

        if response.status_code == expected_status:
            return True, f"✓ {endpoint} returned {response.status_code}"
        else:
            return False, f"✗ {endpoint} returned {response.status_code} (expected {expected_status})"

    except requests.exceptions.Timeout:
        return False, f"✗ {endpoint} timed out after {timeout} seconds"
    except requests.exceptions.ConnectionError:
        return False, f"✗ {endpoint} connection failed"
    except requests.exceptions.RequestException as e:
        return False, f"✗ {endpoint} error: {str(e)}"


def check_health_endpoint(url: str, timeout: int = 10) -> Tuple[bool, str]:
    """
    Checks the /api/health endpoint body: {"status": "OK", "timestamp": ...}.

    Args:
        url: Base deployment URL
        timeout: Request timeout in seconds

    Returns:
        Tuple[bool, str]: (success, message)
    """
    full_url = f"{url.rstrip('/')}/api/health"

    try:
        response = requests.get(full_url, timeout=timeout)

        if response.status_code != 200:
            return False, f"✗ /api/health returned {response.status_code}"

        try:
            data = response.json()
        except ValueError:
            return False, "✗ /api/health returned invalid JSON"

        if data.get('status') != 'OK':
            return False, f"✗ /api/health status: {data.get('status')}"
        if not data.get('timestamp'):
            return False, "✗ /api/health response has no timestamp"

        return True, f"✓ /api/health returned 200 at {data['timestamp']}"

    except requests.exceptions.Timeout:
        return False, f"✗ /api/health timed out after {timeout} seconds"
    except requests.exceptions.ConnectionError:
        return False, "✗ /api/health connection failed"
    except requests.exceptions.RequestException as e:
        return False, f"✗ /api/health error: {str(e)}"


def check_not_found(url: str, timeout: int = 10) -> Tuple[bool, str]:
    """Checks that unmatched paths get the JSON 404 body."""
    full_url = f"{url.rstrip('/')}{NOT_FOUND_PROBE}"

    try:
        response = requests.get(full_url, timeout=timeout)
        if response.status_code != 404:
            return False, f"✗ {NOT_FOUND_PROBE} returned {response.status_code} (expected 404)"
        try:
            data = response.json()
        except ValueError:
            return False, f"✗ {NOT_FOUND_PROBE} returned a non-JSON 404"
        if data != {"error": "Route not found"}:
            return False, f"✗ {NOT_FOUND_PROBE} returned unexpected body {data}"
        return True, f"✓ {NOT_FOUND_PROBE} returned the JSON 404 body"

    except requests.exceptions.RequestException as e:
        return False, f"✗ {NOT_FOUND_PROBE} error: {str(e)}"


def run_health_checks(url: str, environment: str) -> Dict[str, Tuple[bool, str]]:
    """
    Runs all health checks and returns results.

    Args:
        url: Base deployment URL
        environment: Deployment environment

    Returns:
        Dict[str, Tuple[bool, str]]: Check results keyed by check name
    """
    print(f"\n{'='*60}")
    print(f"Post-Deployment Health Checks - {environment.upper()}")
    print(f"{'='*60}\n")
    print(f"Target URL: {url}\n")

    results = {}

    # Check 1: API health check
    print("Check 1: API health check (/api/health)...")
    success, message = check_health_endpoint(url, timeout=15)
    results["api_health"] = (success, message)
    print(f"  {message}\n")

    # Check 2: Catalog responsiveness
    print("Check 2: Catalog endpoint responsiveness (/api/products)...")
    success, message = check_endpoint(url, "/api/products", timeout=15, expected_status=200)
    results["api_products"] = (success, message)
    print(f"  {message}\n")

    # Check 3: Not-found handler
    print("Check 3: Not-found handler...")
    success, message = check_not_found(url, timeout=15)
    results["not_found"] = (success, message)
    print(f"  {message}\n")

    return results


def print_summary(results: Dict[str, Tuple[bool, str]], environment: str) -> bool:
    """
    Prints a PASS/FAIL line per check.

    Returns:
        bool: True if all checks passed, False otherwise
    """
    print(f"{'='*60}")
    print(f"Health Check Summary - {environment.upper()}")
    print(f"{'='*60}\n")

    failed = [name for name, (success, _) in results.items() if not success]

    for check_name, (success, _) in results.items():
        print(f"{'✓' if success else '✗'} {check_name}: {'PASS' if success else 'FAIL'}")

    print(f"\nTotal: {len(results) - len(failed)}/{len(results)} checks passed\n")

    if failed:
        print(f"✗ {len(failed)} health check(s) failed: {', '.join(failed)}\n")
        return False

    print("✓ All health checks passed. API is healthy.\n")
    return True


def run_with_retries(url: str, environment: str, attempts: int, delay: int) -> bool:
    """Re-runs the checks until they all pass or attempts run out."""
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            print(f"\nRetry attempt {attempt}/{attempts} in {delay}s...")
            time.sleep(delay)

        results = run_health_checks(url, environment)
        if print_summary(results, environment):
            return True

    return False


def main():
    parser = argparse.ArgumentParser(description="Run post-deployment health checks against the API")
    parser.add_argument("--url", required=True, help="Deployment URL to check")
    parser.add_argument(
        "--environment",
        required=True,
        choices=["staging", "production"],
        help="Deployment environment"
    )
    parser.add_argument(
        "--retry",
        type=int,
        default=3,
        help="Number of attempts before giving up (default: 3)"
    )
    parser.add_argument(
        "--retry-delay",
        type=int,
        default=10,
        help="Delay in seconds between attempts (default: 10)"
    )
    args = parser.parse_args()

    if run_with_retries(args.url, args.environment, args.retry, args.retry_delay):
        sys.exit(0)

    print(f"✗ HEALTH CHECKS FAILED AFTER {args.retry} ATTEMPTS", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
