#!/usr/bin/env python3
"""Retry semantic index sync for one or more owners.

Detached reconciliation is best effort and never retried by the service;
run this on a schedule to pick up documents whose last sync failed.

Usage:
  export API_URL=http://localhost:8000 USER_HEADER=X-User-Id
  python scripts/resync_documents.py --owner alice --owner bob [--force] [--min-word-count 20]
  python scripts/resync_documents.py --owners-file owners.txt
"""
from __future__ import annotations

import argparse
import os
import sys

import httpx


def read_owners(args: argparse.Namespace) -> list[str]:
    owners = list(args.owner or [])
    if args.owners_file:
        with open(args.owners_file, encoding="utf-8") as f:
            owners.extend(line.strip() for line in f if line.strip() and not line.startswith("#"))
    return list(dict.fromkeys(owners))


def main() -> int:
    parser = argparse.ArgumentParser(description="Resync documents to the semantic index")
    parser.add_argument("--owner", action="append", help="Owner id (repeatable)")
    parser.add_argument("--owners-file", type=str, help="File with one owner id per line")
    parser.add_argument("--force", action="store_true", help="Push even when text is unchanged")
    parser.add_argument("--include-archived", action="store_true", help="Also push archived documents")
    parser.add_argument("--min-word-count", type=int, default=None, help="Skip shorter documents")
    args = parser.parse_args()

    owners = read_owners(args)
    if not owners:
        parser.error("no owners given (use --owner or --owners-file)")

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    user_header = os.environ.get("USER_HEADER", "X-User-Id")
    body: dict = {"force": args.force, "include_archived": args.include_archived}
    if args.min_word_count is not None:
        body["min_word_count"] = args.min_word_count

    failed_owners = 0
    with httpx.Client(timeout=300.0) as client:
        for owner in owners:
            try:
                r = client.post(
                    f"{api_url}/v1/documents/sync",
                    json=body,
                    headers={user_header: owner, "Content-Type": "application/json"},
                )
                r.raise_for_status()
            except httpx.HTTPError as e:
                print(f"{owner}: request failed: {e}", file=sys.stderr)
                failed_owners += 1
                continue
            data = r.json()
            print(
                f"{owner}: synced={data['synced']} skipped={data['skipped']} failed={data['failed']}"
            )
            for result in data["results"]:
                if not result["success"]:
                    print(f"  {result['document_id']}: {result['error']}", file=sys.stderr)
            if data["failed"]:
                failed_owners += 1

    return 1 if failed_owners else 0


if __name__ == "__main__":
    sys.exit(main())
