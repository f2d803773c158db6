# users/signals.py
import logging

from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def reward_referrer_on_signup(sender, instance, created, **kwargs):
    """Pay the referrer once the new account has committed."""
    if not created or not instance.referred_by_id:
        return

    def _after_commit():
        from business.config import BusinessConfig
        from rewards.services import LoyaltyService

        config = BusinessConfig.load()
        if not config.ref_earning_status:
            return
        ok = LoyaltyService(config).award_referrer(instance.referred_by_id, "referrer", instance.pk)
        if not ok:
            logger.warning("Referral reward failed for referrer=%s", instance.referred_by_id)

    transaction.on_commit(_after_commit)
