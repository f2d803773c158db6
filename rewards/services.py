# rewards/services.py
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import DatabaseError

from business.config import BusinessConfig
from core.uow import UnitOfWork
from wallets.models import WalletTransaction, new_transaction_id, q
from wallets.services import WalletService
from .models import LoyaltyTransaction

logger = logging.getLogger(__name__)

User = get_user_model()
PointType = LoyaltyTransaction.Type


def whole_points(value) -> int:
    """Point counts are integers; 2.7 points is rejected rather than truncated."""
    points = Decimal(str(value))
    if points != points.to_integral_value():
        raise ValueError("INVALID_POINTS")
    return int(points)


def parse_type(transaction_type) -> LoyaltyTransaction.Type:
    try:
        tx_type = PointType(transaction_type)
    except ValueError:
        raise ValueError("UNKNOWN_TRANSACTION_TYPE")
    if tx_type not in (PointType.ORDER_PLACE, PointType.POINT_TO_WALLET):
        raise ValueError("UNKNOWN_TRANSACTION_TYPE")
    return tx_type


class LoyaltyService:
    """
    Loyalty point mutations, referral rewards and the point-to-wallet
    conversion. Mirrors WalletService: the point balance and its ledger row
    are written in one unit of work.
    """

    def __init__(self, config: Optional[BusinessConfig] = None, wallet: Optional[WalletService] = None):
        self.config = config if config is not None else BusinessConfig.load()
        self.wallet = wallet if wallet is not None else WalletService(self.config)

    # ---------------------------- points ---------------------------- #

    def credit_or_debit_points(self, user_id, reference, amount, transaction_type) -> bool:
        """
        order_place credits a percentage of the order amount (floored);
        point_to_wallet debits amount points verbatim.

        A disabled loyalty program is a successful no-op. Returns False when
        the user does not exist or the write was rolled back.
        """
        tx_type = parse_type(transaction_type)

        if not self.config.loyalty_point_status:
            logger.debug("Loyalty disabled; nothing to do for user=%s", user_id)
            return True

        credit, debit = self.split(tx_type, amount)
        if credit == 0 and debit == 0:
            logger.debug("Loyalty %s for user=%s earns no points", tx_type, user_id)
            return True

        try:
            with UnitOfWork() as uow:
                user = uow.lock_user(user_id)
                self.post(uow, user, credit=credit, debit=debit, transaction_type=tx_type, reference=reference)
        except User.DoesNotExist:
            logger.info("Loyalty %s for unknown user=%s", tx_type, user_id)
            return False
        except DatabaseError:
            logger.exception("Loyalty %s rolled back for user=%s", tx_type, user_id)
            return False
        return True

    def split(self, tx_type, amount) -> tuple[int, int]:
        if Decimal(str(amount)) < 0:
            raise ValueError("AMOUNT_MUST_BE_POSITIVE")
        if tx_type == PointType.ORDER_PLACE:
            percent = self.config.loyalty_point_percent_on_item_purchase
            points = (Decimal(str(amount)) * percent / 100).to_integral_value(rounding=ROUND_FLOOR)
            return int(points), 0
        return 0, whole_points(amount)

    @staticmethod
    def post(uow: UnitOfWork, user, *, credit: int, debit: int, transaction_type: str, reference=None) -> LoyaltyTransaction:
        """
        Apply credit/debit points to a user row locked by uow and append the
        ledger row. Raises ValueError("INSUFFICIENT_POINTS") rather than let
        the balance go negative.
        """
        if not uow.active:
            raise RuntimeError("loyalty writes need an active UnitOfWork")

        new_balance = int(user.loyalty_point) + credit - debit
        if new_balance < 0:
            raise ValueError("INSUFFICIENT_POINTS")

        user.loyalty_point = new_balance
        user.save(update_fields=["loyalty_point"])

        entry = LoyaltyTransaction.objects.create(
            user=user,
            transaction_type=transaction_type,
            credit=credit,
            debit=debit,
            balance=new_balance,
            reference=reference,
        )
        logger.info(
            "Loyalty %s user=%s credit=%s debit=%s balance=%s",
            transaction_type, user.pk, credit, debit, new_balance,
        )
        return entry

    # ---------------------------- referral ---------------------------- #

    def award_referrer(self, referrer_user_id, transaction_type, referred_user_id) -> bool:
        """
        Credit the configured flat referral reward to the referrer's wallet.
        The referred user's id is recorded as the reference.
        """
        if transaction_type != WalletTransaction.Type.REFERRER:
            raise ValueError("UNKNOWN_TRANSACTION_TYPE")

        reward = q(self.config.ref_earning_exchange_rate)
        if reward <= 0:
            logger.debug("Referral reward not configured; nothing paid to user=%s", referrer_user_id)
            return True

        try:
            with UnitOfWork() as uow:
                referrer = uow.lock_user(referrer_user_id)
                self.wallet.post(
                    uow, referrer,
                    credit=reward, debit=Decimal("0.00"),
                    transaction_type=WalletTransaction.Type.REFERRER,
                    reference=str(referred_user_id),
                )
        except User.DoesNotExist:
            logger.info("Referral reward for unknown referrer=%s", referrer_user_id)
            return False
        except DatabaseError:
            logger.exception("Referral reward rolled back for referrer=%s", referrer_user_id)
            return False
        return True

    # ------------------------ point -> wallet ------------------------ #

    def convert_points_to_wallet(self, user_id, points: int, wallet_amount) -> bool:
        """
        Debit points and credit wallet_amount in a single unit of work,
        writing one LoyaltyTransaction and one WalletTransaction that share
        a conversion reference.

        Raises ValueError("INSUFFICIENT_POINTS") (nothing written) when the
        user holds fewer than points.
        """
        points = whole_points(points)
        amount = q(wallet_amount)
        if points <= 0 or amount <= 0:
            raise ValueError("AMOUNT_MUST_BE_POSITIVE")

        reference = f"conversion-{new_transaction_id()}"
        try:
            with UnitOfWork() as uow:
                user = uow.lock_user(user_id)
                self.post(
                    uow, user,
                    credit=0, debit=points,
                    transaction_type=PointType.LOYALTY_POINT_TO_WALLET,
                    reference=reference,
                )
                self.wallet.post(
                    uow, user,
                    credit=amount, debit=Decimal("0.00"),
                    transaction_type=WalletTransaction.Type.LOYALTY_POINT_TO_WALLET,
                    reference=reference,
                )
        except User.DoesNotExist:
            logger.info("Point conversion for unknown user=%s", user_id)
            return False
        except DatabaseError:
            logger.exception("Point conversion rolled back for user=%s", user_id)
            return False
        return True

    def wallet_amount_for(self, points: int) -> Decimal:
        """Wallet currency a number of points converts to at the current rate."""
        return q(Decimal(int(points)) / self.config.points_per_currency_unit)
