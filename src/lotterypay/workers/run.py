"""CLI runner for lotterypay workers.

Usage:
    python -m lotterypay.workers.run reconcile
    python -m lotterypay.workers.run webhook tr_WDqYK6vllg [tr_... ...]
"""

from __future__ import annotations

import argparse
import logging
import sys

from lotterypay.core.logging import setup_logging

logger = logging.getLogger(__name__)


def _open(settings):  # type: ignore[no-untyped-def]
    from lotterypay.core.database import Database
    from lotterypay.services.factory import build_ticket_service

    settings.require_complete()
    database = Database(settings).open()
    return database, build_ticket_service(settings, database)


def run_reconcile(args: argparse.Namespace) -> int:
    """Re-check every pending ticket that has an open charge."""
    from lotterypay.core.config import Settings
    from lotterypay.repositories.ticket_repository import TicketRepository
    from lotterypay.workers.reconcile_worker import ReconcileWorker

    database, service = _open(Settings())
    try:
        worker = ReconcileWorker(ticket_service=service, ticket_repo=TicketRepository(database))
        result = worker.run()
    finally:
        database.close()

    logger.info(
        "Reconcile complete: checked=%d resolved=%d errors=%d",
        len(result.checked),
        len(result.resolved),
        len(result.errors),
    )
    for ticket_id, status in result.resolved.items():
        logger.info("  %s -> %s", ticket_id, status)
    for error in result.errors:
        logger.error("  %s", error)
    return 0 if result.success else 1


def run_webhook(args: argparse.Namespace) -> int:
    """Replay payment callbacks by reference (e.g. after a missed webhook)."""
    from lotterypay.core.config import Settings
    from lotterypay.workers.webhook_worker import WebhookWorker

    database, service = _open(Settings())
    try:
        worker = WebhookWorker(service)
        for reference in args.references:
            worker.enqueue(reference)
        result = worker.run_pending()
    finally:
        database.close()

    logger.info(
        "Webhook replay complete: processed=%d errors=%d",
        len(result.processed),
        len(result.errors),
    )
    return 0 if result.success else 1


WORKERS = {
    "reconcile": run_reconcile,
    "webhook": run_webhook,
}


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run a lotterypay worker once",
        prog="python -m lotterypay.workers.run",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="worker", required=True)
    sub.add_parser("reconcile", help="Re-check pending tickets with the gateway")
    webhook = sub.add_parser("webhook", help="Process payment references now")
    webhook.add_argument("references", nargs="+", help="Gateway payment ids")

    args = parser.parse_args()
    setup_logging(level=args.log_level.upper())

    logger.info("Running worker: %s", args.worker)
    sys.exit(WORKERS[args.worker](args))


if __name__ == "__main__":
    main()
