# wallets/services.py
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_FLOOR
from typing import Optional, Union

from django.contrib.auth import get_user_model
from django.db import DatabaseError

from business.config import BusinessConfig
from core.uow import UnitOfWork
from .models import WalletTransaction, q

logger = logging.getLogger(__name__)

User = get_user_model()
TxType = WalletTransaction.Type

CREDIT_TYPES = frozenset({TxType.ADD_FUND_BY_ADMIN, TxType.ADD_FUND, TxType.LOYALTY_POINT, TxType.REFERRER})
DEBIT_TYPES = frozenset({TxType.ORDER_PLACE})

# Callers of these types get the ledger row back; add_fund gets True.
RETURNS_RECORD = frozenset({TxType.LOYALTY_POINT, TxType.ORDER_PLACE, TxType.ADD_FUND_BY_ADMIN, TxType.REFERRER})


def parse_type(transaction_type) -> WalletTransaction.Type:
    try:
        tx_type = TxType(transaction_type)
    except ValueError:
        raise ValueError("UNKNOWN_TRANSACTION_TYPE")
    if tx_type not in CREDIT_TYPES and tx_type not in DEBIT_TYPES:
        # e.g. loyalty_point_to_wallet, which only the conversion writes
        raise ValueError("UNKNOWN_TRANSACTION_TYPE")
    return tx_type


class WalletService:
    """
    Wallet balance mutations. Every change to User.wallet_balance goes
    through post(), which writes the balance and its ledger row together.
    """

    def __init__(self, config: Optional[BusinessConfig] = None):
        self.config = config if config is not None else BusinessConfig.load()

    # ---------------------------- public API ---------------------------- #

    def credit_or_debit(
        self,
        user_id,
        amount: Decimal | int | float | str,
        transaction_type: str,
        reference: Optional[str] = None,
    ) -> Union[WalletTransaction, bool]:
        """
        Credit or debit a wallet according to transaction_type.

        Returns the ledger row for loyalty_point, order_place,
        add_fund_by_admin and referrer; True for add_fund. Returns False
        when the wallet feature is off, the user does not exist, or the
        write was rolled back. A debit larger than the balance raises
        ValueError("INSUFFICIENT_FUNDS") and writes nothing.
        """
        tx_type = parse_type(transaction_type)
        credit, debit = self.split(tx_type, amount)

        if not self.config.wallet_status:
            logger.info("Wallet disabled; declined %s for user=%s", tx_type, user_id)
            return False

        try:
            with UnitOfWork() as uow:
                user = uow.lock_user(user_id)
                entry = self.post(
                    uow, user,
                    credit=credit, debit=debit,
                    transaction_type=tx_type, reference=reference,
                )
        except User.DoesNotExist:
            logger.info("Wallet %s for unknown user=%s", tx_type, user_id)
            return False
        except DatabaseError:
            logger.exception("Wallet %s rolled back for user=%s", tx_type, user_id)
            return False

        return entry if tx_type in RETURNS_RECORD else True

    # ----------------------------- helpers ------------------------------ #

    def split(self, tx_type, amount) -> tuple[Decimal, Decimal]:
        """(credit, debit) for an amount under the sign rule of tx_type."""
        amt = q(amount)
        if amt <= 0:
            raise ValueError("AMOUNT_MUST_BE_POSITIVE")

        if tx_type == TxType.LOYALTY_POINT:
            rate = self.config.points_per_currency_unit
            amt = (Decimal(str(amount)) / rate).to_integral_value(rounding=ROUND_FLOOR)
            if amt <= 0:
                raise ValueError("AMOUNT_TOO_SMALL")
            return q(amt), Decimal("0.00")
        if tx_type in CREDIT_TYPES:
            return amt, Decimal("0.00")
        return Decimal("0.00"), amt

    @staticmethod
    def post(
        uow: UnitOfWork,
        user,
        *,
        credit: Decimal,
        debit: Decimal,
        transaction_type: str,
        reference: Optional[str] = None,
    ) -> WalletTransaction:
        """
        Apply credit/debit to a user row locked by uow and append the ledger
        row carrying the new balance. Must run inside uow's block.
        Raises ValueError("INSUFFICIENT_FUNDS") rather than let the balance
        go negative.
        """
        if not uow.active:
            raise RuntimeError("wallet writes need an active UnitOfWork")

        new_balance = q(user.wallet_balance) + q(credit) - q(debit)
        if new_balance < 0:
            raise ValueError("INSUFFICIENT_FUNDS")

        user.wallet_balance = new_balance
        user.save(update_fields=["wallet_balance"])

        entry = WalletTransaction.objects.create(
            user=user,
            transaction_type=transaction_type,
            credit=q(credit),
            debit=q(debit),
            balance=new_balance,
            reference=reference,
        )
        logger.info(
            "Wallet %s user=%s credit=%s debit=%s balance=%s",
            transaction_type, user.pk, entry.credit, entry.debit, new_balance,
        )
        return entry
