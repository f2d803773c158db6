# core/management/commands/audit_ledgers.py
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from rewards.models import LoyaltyTransaction
from wallets.models import WalletTransaction


def audit_user(user, model, balance_field, zero):
    """
    Replay one user's ledger oldest-first. Returns a list of problems: rows
    whose balance snapshot breaks the running sum, and a final balance that
    differs from the user's stored balance.
    """
    problems = []
    running = zero
    rows = model.objects.filter(user=user).order_by("created_at", "id")
    for row in rows.iterator():
        running = running + row.credit - row.debit
        if row.balance != running:
            problems.append(
                f"{model.__name__} {row.transaction_id}: balance {row.balance} != running sum {running}"
            )
    stored = getattr(user, balance_field)
    if stored != running:
        problems.append(f"{balance_field} {stored} != ledger {running}")
    return problems


class Command(BaseCommand):
    help = "Replay wallet and loyalty ledgers and report users whose balances disagree with them."

    def add_arguments(self, parser):
        parser.add_argument("--user", type=int, action="append", dest="users",
                            help="Only audit this user id (repeatable)")
        parser.add_argument("--fail-on-mismatch", action="store_true",
                            help="Exit non-zero if any mismatch is found")

    def handle(self, *args, **opts):
        User = get_user_model()
        qs = User.objects.order_by("pk")
        if opts.get("users"):
            qs = qs.filter(pk__in=opts["users"])

        checked = 0
        bad = 0
        for user in qs.iterator():
            problems = (
                audit_user(user, WalletTransaction, "wallet_balance", Decimal("0.00"))
                + audit_user(user, LoyaltyTransaction, "loyalty_point", 0)
            )
            checked += 1
            if problems:
                bad += 1
                for p in problems:
                    self.stderr.write(f"user={user.pk}: {p}")

        summary = f"Audited {checked} user(s). {bad} with mismatches."
        if bad and opts.get("fail_on_mismatch"):
            raise CommandError(summary)
        self.stdout.write(self.style.SUCCESS(summary) if not bad else self.style.WARNING(summary))
