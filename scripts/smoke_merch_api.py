#!/usr/bin/env python3
"""
Smoke check for a running MENU site API: health, merch listing and checkout.

Start the API first (in another terminal):
  INTEGRATIONS_MODE=mock uvicorn menu_site.api.main:app --host 127.0.0.1 --port 8000

Then run this script:
  python scripts/smoke_merch_api.py
  python scripts/smoke_merch_api.py --base-url http://127.0.0.1:8000 --qty 2
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List, Optional

import requests


def get_json(url: str, timeout: int = 30) -> Any:
    r = requests.get(url, timeout=timeout)
    r.raise_for_status()
    return r.json()


def post_json(url: str, data: Dict[str, Any], timeout: int = 30) -> requests.Response:
    return requests.post(url, json=data, timeout=timeout)


def first_in_stock_variation(items: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    for item in items:
        for variation in item.get("variations", []):
            if variation.get("inStock"):
                return variation
    return None


def main() -> int:
    parser = argparse.ArgumentParser(description="Smoke check the merch/checkout API")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--qty", type=int, default=1, help="Quantity to put in the test cart")
    args = parser.parse_args()
    base = args.base_url.rstrip("/")

    print("=== MENU site API smoke check ===\n")
    print(f"Base URL: {base}\n")

    print("1) GET /health")
    try:
        health = get_json(f"{base}/health")
        print(f"   integrations={health.get('integrations')} catalog={health.get('catalog')}\n")
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        if "Connection refused" in str(e) or "Failed to establish" in str(e):
            print("   -> Start the API first: uvicorn menu_site.api.main:app --host 127.0.0.1 --port 8000")
        return 1

    print("2) GET /api/merch")
    try:
        items = get_json(f"{base}/api/merch")
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        return 1
    for item in items:
        flag = " (sold out)" if item.get("itemSoldOut") else ""
        print(f"   {item['name']}{flag}: {len(item.get('variations', []))} variation(s)")
    print()

    variation = first_in_stock_variation(items)
    if variation is None:
        print("   No in-stock variation to check out; stopping.")
        return 1

    print(f"3) POST /api/checkout (id={variation['id']}, qty={args.qty})")
    try:
        r = post_json(f"{base}/api/checkout", {"items": [{"id": variation["id"], "qty": args.qty}]})
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        return 1
    body = r.json()
    if r.status_code != 200:
        print(f"   FAIL: {r.status_code} {body.get('error')}")
        return 1
    print(f"   url: {body['url']}\n")

    print("4) POST /api/checkout (empty cart, expect 400)")
    r = post_json(f"{base}/api/checkout", {"items": []})
    print(f"   {r.status_code} {r.json()}\n")
    if r.status_code != 400:
        return 1

    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
