#!/usr/bin/env python3
"""Print the contributor roster of a GitHub repository.

Usage:
  python scripts/fetch_contributors.py OWNER/REPO [--token TOKEN] [--json] [-v]

Notes:
- OWNER/REPO may also be a github.com URL
- token defaults to GITHUB_TOKEN, then GH_TOKEN
- at most 50 contributors are processed (ROSTER_MAX_CONTRIBUTORS)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional

_api_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _api_dir)

from roster.models.contributor import ContributorRecord, FetchContributorsSuccess
from roster.services.contributor_service import fetch_contributors
from roster.services.repository_name import parse_repository

log = logging.getLogger(__name__)


def _env_token() -> Optional[str]:
    for name in ("GITHUB_TOKEN", "GH_TOKEN"):
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def format_record(record: ContributorRecord) -> str:
    perms = ",".join(record.role.permissions) or "-"
    emails = ",".join(record.emails) or "-"
    repos = ", ".join(f"{r.full_name} ({r.role})" for r in record.external_repos) or "-"
    return (
        f"{record.username}\trole={record.role.role}\tpermissions={perms}"
        f"\tcommits={record.activity.commit_count}\temails={emails}\trepos={repos}"
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Fetch the contributor roster of a GitHub repository")
    ap.add_argument("repository", help="owner/repo or https://github.com/owner/repo")
    ap.add_argument(
        "--token",
        default=None,
        help="GitHub personal access token (default: $GITHUB_TOKEN or $GH_TOKEN)",
    )
    ap.add_argument("--json", action="store_true", help="Print the full result as JSON")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    token = args.token or _env_token() or ""
    result = asyncio.run(fetch_contributors(args.repository, token))

    if args.json:
        print(json.dumps(result.model_dump(), indent=2))
        return 0 if result.success else 1

    if not isinstance(result, FetchContributorsSuccess):
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    if not result.data:
        print(f"No contributors found for {parse_repository(args.repository).full_name}.")
        return 0
    for record in result.data:
        print(format_record(record))
    log.info("fetched %d contributors", len(result.data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
