#!/usr/bin/env python3
"""
Note capture CLI - submit notes with offline fallback and sync the queue

Usage:
    python -m maelstrom.offline_queue.cli [--offline] submit "note text" [--format json|text]
    python -m maelstrom.offline_queue.cli pending [--format json|text]
    python -m maelstrom.offline_queue.cli sync [--format json|text]
    python -m maelstrom.offline_queue.cli clear (--id ID | --all)

Global options:
    --queue-path PATH   SQLite file holding the offline queue
    --api-url URL       Maelstrom API base URL
    --user-id ID        identity used for delivery (or MAELSTROM_USER_ID)
    --offline           skip the connectivity probe and act as offline
    --log-level LEVEL   stderr log level (default WARNING)
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import List, Optional

from maelstrom.client import MaelstromApiClient
from maelstrom.config import Config
from maelstrom.errors import NoteValidationError
from maelstrom.logger import setup_logger

from .connectivity import HttpConnectivityMonitor
from .models import PendingNote
from .note_queue import OfflineNoteQueue
from .storage import SQLiteStorage
from .sync import NoteSynchronizer


def format_pending_text(note: PendingNote) -> str:
    return f"[{note.id}] {note.created_at} | {note.content}"


def cmd_submit(
    synchronizer: NoteSynchronizer, content: str, output_format: str
) -> int:
    """Submit a note, queuing it if it cannot be delivered"""
    try:
        outcome = synchronizer.submit(content)
    except NoteValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if output_format == "json":
        print(
            json.dumps(
                {
                    "delivered": outcome.delivered,
                    "pending": outcome.pending.to_dict() if outcome.pending else None,
                },
                ensure_ascii=False,
            )
        )
    elif outcome.delivered:
        print("Saved.")
    else:
        print(f"Saved offline, will sync later: {outcome.pending.id}")
    return 0


def cmd_pending(queue: OfflineNoteQueue, output_format: str) -> int:
    """Show queued notes"""
    notes = queue.list_pending()
    if output_format == "json":
        print(json.dumps([note.to_dict() for note in notes], ensure_ascii=False))
    elif not notes:
        print("No pending notes.")
    else:
        for note in notes:
            print(format_pending_text(note))
    return 0


def cmd_sync(synchronizer: NoteSynchronizer, output_format: str) -> int:
    """Run one sync pass"""
    report = synchronizer.sync()
    if output_format == "json":
        print(json.dumps(asdict(report), ensure_ascii=False))
    elif report.skipped:
        print(f"Sync skipped: {report.skipped}")
    else:
        print(f"Synced {len(report.synced)} note(s), {len(report.failed)} still pending.")
    return 0


def cmd_clear(queue: OfflineNoteQueue, note_id: Optional[str], clear_all: bool) -> int:
    """Remove one queued note or empty the queue"""
    if clear_all:
        queue.clear_all()
        print("Cleared all pending notes.")
    else:
        queue.clear_pending(note_id)
        print(f"Cleared: {note_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Note capture CLI with offline queue",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--queue-path", type=str, help="SQLite file holding the offline queue")
    parser.add_argument("--api-url", type=str, help="Maelstrom API base URL")
    parser.add_argument("--user-id", type=str, help="identity used for delivery")
    parser.add_argument(
        "--offline", action="store_true", help="act as offline without probing the API"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="stderr log level",
    )

    subparsers = parser.add_subparsers(dest="command", help="command to run", required=True)

    parser_submit = subparsers.add_parser("submit", help="submit a note")
    parser_submit.add_argument("content", help="note text (max 280 characters)")
    parser_submit.add_argument("--format", choices=["json", "text"], default="text")

    parser_pending = subparsers.add_parser("pending", help="list queued notes")
    parser_pending.add_argument("--format", choices=["json", "text"], default="text")

    parser_sync = subparsers.add_parser("sync", help="deliver queued notes")
    parser_sync.add_argument("--format", choices=["json", "text"], default="text")

    parser_clear = subparsers.add_parser("clear", help="remove queued notes")
    target = parser_clear.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", dest="note_id", help="id of the queued note")
    target.add_argument("--all", dest="clear_all", action="store_true", help="empty the queue")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    args = build_parser().parse_args(argv)
    config = Config.load()
    setup_logger(log_level=args.log_level, log_file=None)

    storage = SQLiteStorage(
        args.queue_path
        or config.resolve_storage_path(
            config.storage.offline_queue_path, "MAELSTROM_OFFLINE_DB_PATH"
        )
    )
    if args.api_url:
        config.api_base_url = args.api_url
    monitor = HttpConnectivityMonitor(
        probe_url=config.probe_url,
        timeout=config.connectivity.timeout_seconds,
    )
    queue = OfflineNoteQueue(storage, connectivity=monitor)
    client = MaelstromApiClient(
        config.api_base_url, user_id=args.user_id or os.getenv("MAELSTROM_USER_ID")
    )
    synchronizer = NoteSynchronizer(queue, store=client, identity=client)

    if args.command in ("submit", "sync"):
        if args.offline:
            monitor.set_online(False)
        else:
            monitor.refresh()

    if args.command == "submit":
        return cmd_submit(synchronizer, args.content, args.format)
    elif args.command == "pending":
        return cmd_pending(queue, args.format)
    elif args.command == "sync":
        return cmd_sync(synchronizer, args.format)
    elif args.command == "clear":
        return cmd_clear(queue, args.note_id, args.clear_all)
    else:
        print(f"Error: unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
