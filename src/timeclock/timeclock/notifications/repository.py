from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence, Set

from .model import PushSubscription


class NotificationLogRepository(Protocol):
    def exists(self, *, employee_id: int, entry_time: str, schedule_date: date, entry_slot: int) -> bool:
        raise NotImplementedError

    def list_notified_employee_ids(
        self,
        employee_ids: Sequence[int],
        *,
        entry_time: str,
        schedule_date: date,
        entry_slot: int,
    ) -> Set[int]:
        """Subset of employee_ids already logged for the given reminder."""

        raise NotImplementedError

    def record(
        self,
        *,
        employee_id: int,
        entry_time: str,
        schedule_date: date,
        entry_slot: int,
        notified_at: datetime,
    ) -> bool:
        """Append a log row.

        Returns False when the same reminder was already logged (e.g. by a
        concurrent run) instead of raising.
        """

        raise NotImplementedError


class PushSubscriptionRepository(Protocol):
    def list_for_employee(self, employee_id: int) -> Sequence[PushSubscription]:
        raise NotImplementedError

    def upsert(self, *, employee_id: int, endpoint: str, p256dh: str, auth: str) -> None:
        """Insert, or re-assign keys/employee when the endpoint already exists."""

        raise NotImplementedError

    def delete_by_endpoint(self, endpoint: str) -> bool:
        raise NotImplementedError
