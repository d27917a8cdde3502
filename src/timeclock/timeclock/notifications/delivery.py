from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from pywebpush import WebPushException, webpush

from ..core.constants import NOTIFICATION_ICON, NOTIFICATION_TAG
from ..core.exceptions import DeliveryError
from .model import PushSubscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VapidConfig:
    """VAPID credentials, built once from settings and handed to the adapter."""

    public_key: str = ""
    private_key: str = ""
    subject: str = "mailto:admin@timeclock.app"

    @property
    def is_configured(self) -> bool:
        return bool(self.public_key and self.private_key)


def build_payload(title: str, body: str, data: Optional[dict] = None) -> dict:
    return {
        "title": title,
        "body": body,
        "icon": NOTIFICATION_ICON,
        "badge": NOTIFICATION_ICON,
        "tag": NOTIFICATION_TAG,
        "data": data or {},
    }


class PushDeliveryAdapter:
    """Sends one Web Push message per call.

    Failures surface as DeliveryError; callers decide whether the subscription
    is gone (see DeliveryError.is_gone) and should be removed.
    """

    def __init__(self, config: VapidConfig, *, ttl: int = 3600, sender: Callable = webpush):
        self._config = config
        self._ttl = int(ttl)
        self._sender = sender

    @property
    def public_key(self) -> str:
        return self._config.public_key

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    def deliver(self, subscription: PushSubscription, title: str, body: str, data: Optional[dict] = None) -> None:
        if not self._config.is_configured:
            raise DeliveryError("VAPID keys are not configured")

        payload = json.dumps(build_payload(title, body, data))
        try:
            self._sender(
                subscription_info=subscription.to_subscription_info(),
                data=payload,
                vapid_private_key=self._config.private_key,
                # webpush() adds aud/exp to the claims dict in place.
                vapid_claims={"sub": self._config.subject},
                ttl=self._ttl,
            )
        except WebPushException as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise DeliveryError(f"Push service rejected message: {exc}", status_code=status) from exc
        except requests.RequestException as exc:
            raise DeliveryError(f"Push service unreachable: {exc}") from exc
        except Exception as exc:
            # Malformed subscription or VAPID keys fail inside encryption/signing.
            raise DeliveryError(f"Push message could not be sent: {exc}") from exc

        logger.debug("Delivered push to employee %s", subscription.employee_id)
