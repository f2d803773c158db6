import secrets
import string

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models

REFERRAL_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code(length: int = 8) -> str:
    return "".join(secrets.choice(REFERRAL_ALPHABET) for _ in range(length))


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email)
        user  = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Customer account and owner of the two balances.

    wallet_balance and loyalty_point are only written by
    wallets.services.WalletService and rewards.services.LoyaltyService,
    always together with a ledger row.
    """
    username = None
    email    = models.EmailField(unique=True)
    phone    = models.CharField(max_length=20, blank=True)

    wallet_balance = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    loyalty_point  = models.IntegerField(default=0)

    referral_code = models.CharField(max_length=16, unique=True, default=generate_referral_code)
    referred_by   = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="referrals"
    )

    USERNAME_FIELD  = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    def __str__(self) -> str:
        return self.email
