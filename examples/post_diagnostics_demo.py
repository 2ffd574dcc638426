#!/usr/bin/env python3
"""
Robot Comment Demo

Reads rdjson or rdjsonl diagnostics from stdin and posts the ones that
fall inside the revision's diff to Gerrit as one review.

Usage:
    python examples/post_diagnostics_demo.py <change_id> <revision_id> [tool_name] < diagnostics.json

Environment:
    GERRIT_URL, GERRIT_USERNAME, GERRIT_PASSWORD
    GERRIT_REVIEWER_RUN_ID, GERRIT_REVIEWER_RUN_URL (optional)
"""

import sys
import logging

from gerrit_reviewer.api import ReviewSession
from gerrit_reviewer.config import get_config
from gerrit_reviewer.exceptions import GerritReviewerError
from gerrit_reviewer.gerrit.client import GerritClient
from gerrit_reviewer.models.diagnostic import parse_diagnostics


def main():
    """Main demo function."""
    if len(sys.argv) not in (3, 4):
        print("Usage: python post_diagnostics_demo.py <change_id> <revision_id> [tool_name] < diagnostics.json")
        sys.exit(1)

    change_id, revision_id = sys.argv[1], sys.argv[2]
    tool_name = sys.argv[3] if len(sys.argv) == 4 else ""

    try:
        config = get_config()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    logger = logging.getLogger(__name__)

    client = GerritClient(
        config.gerrit.url,
        username=config.gerrit.username,
        password=config.gerrit.password,
        timeout=config.gerrit.timeout_seconds,
    )

    try:
        diagnostics = parse_diagnostics(sys.stdin.read())
        session = ReviewSession(client, change_id, revision_id, config=config)
        result = session.run(diagnostics, tool_name=tool_name)
    except GerritReviewerError as e:
        logger.error(f"Review failed: {e}")
        sys.exit(1)

    print(f"Submitted {result.submitted} comments, skipped {result.skipped}")


if __name__ == "__main__":
    main()
