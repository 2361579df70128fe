"""
Run agent ranking collection from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Sequence

from agent_ranking.collection.errors import CollectionError
from agent_ranking.config import get_ranking_settings
from agent_ranking.schemas.rankings import FeedRankingResponse
from agent_ranking.services.agent_ranking_service import get_agent_ranking_service


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rank selling agents by listing volume.")
    parser.add_argument(
        "--feed",
        dest="feed",
        default=None,
        help="Optional feed name (regular, garden). Defaults to all feeds.",
    )
    parser.add_argument(
        "--top-k",
        dest="top_k",
        type=int,
        default=None,
        help="Agents to print per feed. Defaults to RANKING_TOP_K.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = get_agent_ranking_service()
    try:
        reports = service.collect(feeds=[args.feed] if args.feed else None)
    except ValueError as exc:
        print(f"Invalid feed selection: {exc}", file=sys.stderr)
        return 2
    except CollectionError as exc:
        print(f"Collection aborted: {exc}", file=sys.stderr)
        return 2

    top_k = args.top_k if args.top_k is not None else get_ranking_settings().top_k
    payload = [
        FeedRankingResponse.from_report(report, top_k=top_k).model_dump(mode="json")
        for report in reports
    ]
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
