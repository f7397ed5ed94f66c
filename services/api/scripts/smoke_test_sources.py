#!/usr/bin/env python3
"""Quick smoke test for configured publishers.

Usage (after `pip install -e .`, from repo root):
  python services/api/scripts/smoke_test_sources.py --source "Phayul"
  python services/api/scripts/smoke_test_sources.py --all

This script performs live HTTP requests.
"""

from __future__ import annotations

import argparse
import logging

from app.ingest import Aggregator
from app.sources import list_source_names, get_parser


def show_source(name: str) -> int:
    parser = get_parser(name)
    print(f"Source: {parser.config.name} [{parser.config.category}/{parser.config.region}]")
    print(f"Feed URL: {parser.config.url}")

    items = parser.fetch_items()
    print(f"Fetched items: {len(items)}")

    for i, it in enumerate(items[: min(3, len(items))], 1):
        print("\n---")
        print(f"#{i}: {it.title} ({it.language})")
        print(it.source_url)
        print(f"published_at={it.published_at} image_url={it.image_url}")
        print(it.excerpt[:300])

        if not it.excerpt:
            print("[WARN] empty excerpt")
    return 0 if items else 1


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--source", default="Phayul", help="Exact publisher name")
    ap.add_argument("--all", action="store_true", help="Run one full aggregation cycle")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.all:
        snap = Aggregator().run_cycle()
        for name in list_source_names():
            print(f"{name:<28} {snap.per_source.get(name, 0)}")
        print(f"total={len(snap.articles)}")
        return 0

    if args.source not in list_source_names():
        print("Unknown source. Available:")
        for n in list_source_names():
            print(" -", n)
        return 2

    return show_source(args.source)


if __name__ == "__main__":
    raise SystemExit(main())
