# core/uow.py
from __future__ import annotations

from typing import Callable, Optional

from django.db import DEFAULT_DB_ALIAS, transaction


class UnitOfWork:
    """
    Scoped atomic block for ledger and order writes.

        with UnitOfWork() as uow:
            user = uow.lock_user(user_id)
            ...
            uow.on_commit(send_email)

    Leaving the block by any exception rolls back every write made inside
    it. Nested units become savepoints of the outer one, so a service call
    made inside a caller's unit commits or rolls back with it.
    """

    def __init__(self, using: Optional[str] = None):
        self.using = using or DEFAULT_DB_ALIAS
        self._atomic = None

    def __enter__(self) -> "UnitOfWork":
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb):
        atomic, self._atomic = self._atomic, None
        return atomic.__exit__(exc_type, exc, tb)

    @property
    def active(self) -> bool:
        return self._atomic is not None

    def lock_user(self, user_id):
        """
        Fetch the balance-owning user row with SELECT ... FOR UPDATE.
        Raises User.DoesNotExist.
        """
        from django.contrib.auth import get_user_model

        self._require_active()
        User = get_user_model()
        return User.objects.using(self.using).select_for_update().get(pk=user_id)

    def on_commit(self, fn: Callable[[], None]) -> None:
        """Run fn once the outermost transaction commits; dropped on rollback."""
        self._require_active()
        transaction.on_commit(fn, using=self.using)

    def _require_active(self) -> None:
        if self._atomic is None:
            raise RuntimeError("UnitOfWork used outside its with-block")
