from decimal import Decimal

from django.test import TestCase

from core.uow import UnitOfWork
from users.models import User
from tests.helpers import make_user


class UnitOfWorkTests(TestCase):

    def setUp(self):
        self.user = make_user()

    def test_exception_rolls_back(self):
        with self.assertRaises(KeyError):
            with UnitOfWork() as uow:
                user = uow.lock_user(self.user.pk)
                user.wallet_balance = Decimal("10.00")
                user.save(update_fields=["wallet_balance"])
                raise KeyError("boom")

        self.user.refresh_from_db()
        self.assertEqual(self.user.wallet_balance, Decimal("0"))

    def test_on_commit_dropped_on_rollback(self):
        calls = []
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            try:
                with UnitOfWork() as uow:
                    uow.on_commit(lambda: calls.append("sent"))
                    raise RuntimeError("abort")
            except RuntimeError:
                pass
        self.assertEqual(callbacks, [])
        self.assertEqual(calls, [])

    def test_on_commit_runs_after_commit(self):
        calls = []
        with self.captureOnCommitCallbacks(execute=True):
            with UnitOfWork() as uow:
                uow.on_commit(lambda: calls.append("sent"))
                self.assertEqual(calls, [])
        self.assertEqual(calls, ["sent"])

    def test_lock_user_outside_block(self):
        uow = UnitOfWork()
        self.assertFalse(uow.active)
        with self.assertRaises(RuntimeError):
            uow.lock_user(self.user.pk)

    def test_lock_unknown_user(self):
        with self.assertRaises(User.DoesNotExist):
            with UnitOfWork() as uow:
                uow.lock_user(424242)
