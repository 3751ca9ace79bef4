#!/usr/bin/env python3
"""Benchmark access checks: latency (p50, p95, p99) and QPS of GET /v1/access.

Every request resolves a fresh authorization snapshot, so this measures the
per-request cost of the resolver against a live database.

Usage:
    export API_URL=http://localhost:8000 KEYCLOAK_URL=http://localhost:8080 \\
           KEYCLOAK_CLIENT_SECRET=... BENCH_USER=... BENCH_PASSWORD=...
    python scripts/bench_access.py --num-requests 500 \\
        --permission task.read.property --permission unit.read.property
"""
from __future__ import annotations

import argparse
import os
import statistics
import sys
import time

import httpx


def get_token(
    keycloak_url: str,
    realm: str,
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
) -> str:
    url = f"{keycloak_url.rstrip('/')}/realms/{realm}/protocol/openid-connect/token"
    r = httpx.post(
        url,
        data={
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=30.0,
    )
    r.raise_for_status()
    return r.json()["access_token"]


def percentile(sorted_values: list[float], fraction: float) -> float:
    index = max(0, min(len(sorted_values) - 1, int(len(sorted_values) * fraction) - 1))
    return sorted_values[index]


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark access checks")
    parser.add_argument("--num-requests", type=int, default=200, help="Number of access checks")
    parser.add_argument(
        "--permission",
        action="append",
        default=None,
        help="Permission key to check (repeatable); default task.read.property",
    )
    parser.add_argument("--output", type=str, default="", help="Optional file for the summary")
    args = parser.parse_args()
    permissions = args.permission or ["task.read.property"]

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    keycloak_url = os.environ.get("KEYCLOAK_URL", "http://localhost:8080")
    realm = os.environ.get("KEYCLOAK_REALM", "opsauth")
    client_id = os.environ.get("KEYCLOAK_CLIENT_ID", "opsauth-api")
    client_secret = os.environ.get("KEYCLOAK_CLIENT_SECRET", "")
    user = os.environ.get("BENCH_USER", "testuser")
    password = os.environ.get("BENCH_PASSWORD", "testpass")

    print("Getting token...")
    token = get_token(keycloak_url, realm, client_id, client_secret, user, password)
    headers = {"Authorization": f"Bearer {token}"}
    params = [("permission", key) for key in permissions]

    latencies: list[float] = []
    allowed = denied = errors = 0
    print(f"Running {args.num_requests} access checks for {', '.join(permissions)}...")
    start_total = time.perf_counter()
    with httpx.Client(timeout=30.0) as client:
        for _ in range(args.num_requests):
            t0 = time.perf_counter()
            r = client.get(f"{api_url}/v1/access", params=params, headers=headers)
            elapsed = time.perf_counter() - t0
            if r.status_code != 200:
                errors += 1
                continue
            latencies.append(elapsed)
            if r.json()["allowed"]:
                allowed += 1
            else:
                denied += 1
    total_elapsed = time.perf_counter() - start_total

    n = len(latencies)
    if n == 0:
        print("No successful access checks.")
        return 1

    ordered = sorted(latencies)
    summary = (
        f"Access benchmark (checks={n}, allowed={allowed}, denied={denied}, errors={errors})\n"
        f"  QPS: {n / total_elapsed:.2f}\n"
        f"  Latency: p50={statistics.median(latencies) * 1000:.1f} ms, "
        f"p95={percentile(ordered, 0.95) * 1000:.1f} ms, "
        f"p99={percentile(ordered, 0.99) * 1000:.1f} ms\n"
        f"  Total time: {total_elapsed:.2f} s\n"
    )
    print(summary)

    if args.output:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
