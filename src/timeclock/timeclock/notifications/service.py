from __future__ import annotations

import logging
from typing import Mapping, Optional
from urllib.parse import urlparse

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from .delivery import PushDeliveryAdapter
from .repository import PushSubscriptionRepository

logger = logging.getLogger(__name__)


class PushSubscriptionService:
    """Use case: employees register/unregister browser push endpoints."""

    def __init__(
        self,
        subscriptions: PushSubscriptionRepository,
        employees: EmployeeRepository,
        delivery: PushDeliveryAdapter,
    ):
        self._subscriptions = subscriptions
        self._employees = employees
        self._delivery = delivery

    @property
    def public_key(self) -> str:
        return self._delivery.public_key

    @staticmethod
    def _require_endpoint(endpoint: Optional[str]) -> str:
        endpoint = require_non_empty(endpoint or "", "Endpoint")
        parsed = urlparse(endpoint)
        if parsed.scheme != "https" or not parsed.netloc:
            raise ValidationError("Endpoint must be an https URL")
        return endpoint

    def subscribe(self, *, employee_id: int, subscription: Mapping) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise ValidationError("Employee not found")

        keys = subscription.get("keys") or {}
        endpoint = self._require_endpoint(subscription.get("endpoint"))
        p256dh = require_non_empty(keys.get("p256dh") or "", "p256dh key")
        auth = require_non_empty(keys.get("auth") or "", "auth key")

        # Same endpoint from another login moves to the current employee.
        self._subscriptions.upsert(employee_id=int(employee_id), endpoint=endpoint, p256dh=p256dh, auth=auth)
        logger.info("Stored push subscription for employee %s", employee_id)

    def unsubscribe(self, *, endpoint: Optional[str]) -> bool:
        endpoint = require_non_empty(endpoint or "", "Endpoint")
        return self._subscriptions.delete_by_endpoint(endpoint)
