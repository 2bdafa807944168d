"""Utility script to preview how a raw push event is normalized."""

from __future__ import annotations

import argparse
import json
import sys

from escrow_notifications.application.use_cases.notifications import normalize_event
from escrow_notifications.domain.entities import EventKind
from escrow_notifications.infrastructure.notifications import serialize_notification


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for event normalization."""

    parser = argparse.ArgumentParser(
        description="Normalize a transport event into the canonical notification.",
    )
    parser.add_argument(
        "event",
        choices=[kind.value for kind in EventKind],
        help="Wire name of the event, e.g. order:status-updated",
    )
    parser.add_argument(
        "payload",
        nargs="?",
        default=None,
        help="JSON payload of the event. Read from stdin when omitted.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Print the normalized notification as JSON."""

    args = parse_args(argv)
    raw = args.payload if args.payload is not None else sys.stdin.read()
    try:
        payload = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON payload: {exc}") from exc

    notification = normalize_event(EventKind(args.event), payload)
    print(json.dumps(serialize_notification(notification), indent=2))


if __name__ == "__main__":
    main()
