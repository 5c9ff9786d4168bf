"""
Refund purchases that have waited too long for admin review.

Pending transactions never expire on their own; operators run this
command by hand (or from cron) to release escrowed money back to
learners.

Usage:
    python manage.py refund_stale_transactions --older-than-days 14
    python manage.py refund_stale_transactions --older-than-days 14 --dry-run
"""

from __future__ import annotations

import logging
from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError

from payments.services import EscrowService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Refund pending_admin escrow transactions older than the given number of days."

    def add_arguments(self, parser):
        parser.add_argument(
            "--older-than-days",
            type=int,
            required=True,
            help="Only refund transactions created more than this many days ago",
        )
        parser.add_argument(
            "--reason",
            default="Not reviewed in time",
            help="Reason stored on each refunded transaction",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List matching transactions without refunding them",
        )

    def handle(self, *args, **options):
        days = options["older_than_days"]
        if days < 0:
            raise CommandError("--older-than-days must be zero or positive")

        older_than = timedelta(days=days)

        if options["dry_run"]:
            stale = EscrowService.find_stale(older_than)
            for tx in stale:
                self.stdout.write(
                    f"{tx.id}  {tx.created_at:%Y-%m-%d}  {tx.amount:>8}  {tx.course_title}"
                )
            self.stdout.write(f"{stale.count()} transaction(s) would be refunded")
            return

        result = EscrowService.refund_stale(older_than, reason=options["reason"])
        refunded = result.data["refunded"]
        skipped = result.data["skipped"]

        for tx_id in refunded:
            self.stdout.write(f"Refunded {tx_id}")
        if skipped:
            self.stderr.write(f"Skipped {len(skipped)} transaction(s): {', '.join(skipped)}")
        self.stdout.write(self.style.SUCCESS(f"Refunded {len(refunded)} transaction(s)"))
