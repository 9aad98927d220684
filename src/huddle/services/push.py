"""Web Push delivery via VAPID.

Wraps ``pywebpush`` so the rest of the code deals with one async call and one
exception type. ``pywebpush`` is blocking, so each delivery runs in a worker
thread.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pywebpush import WebPushException, webpush

from huddle.core.errors import PushDeliveryError
from huddle.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PushConfig:
    """Immutable VAPID credentials and delivery options."""

    public_key: str | None
    private_key: str | None
    contact: str
    ttl_seconds: int

    @property
    def enabled(self) -> bool:
        return bool(self.public_key and self.private_key)


def load_push_config() -> PushConfig:
    """Build configuration object from global settings."""
    return PushConfig(
        public_key=settings.vapid_public_key,
        private_key=settings.vapid_private_key,
        contact=settings.vapid_contact_email,
        ttl_seconds=settings.push_ttl_seconds,
    )


def build_payload(title: str, body: str, url: str | None = None) -> str:
    """Serialize the notification shown by the service worker."""
    return json.dumps({"title": title, "body": body, "url": url or "/"})


class PushSender:
    """Sends one encrypted push message to one subscription."""

    def __init__(self, config: PushConfig | None = None) -> None:
        self.config = config or load_push_config()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def _send_blocking(self, subscription_info: Mapping[str, Any], payload: str) -> None:
        webpush(
            subscription_info=dict(subscription_info),
            data=payload,
            vapid_private_key=self.config.private_key,
            vapid_claims={"sub": self.config.contact},
            ttl=self.config.ttl_seconds,
        )

    async def send(self, subscription_info: Mapping[str, Any], payload: str) -> None:
        """Deliver ``payload`` to a subscription.

        Raises:
            PushDeliveryError: On any failure; ``status_code`` carries the push
                service's HTTP status when one was received.
        """
        endpoint = str(subscription_info.get("endpoint", ""))
        try:
            await asyncio.to_thread(self._send_blocking, subscription_info, payload)
        except WebPushException as exc:
            status_code = getattr(exc.response, "status_code", None)
            raise PushDeliveryError(endpoint, status_code, str(exc)) from exc
        except Exception as exc:
            raise PushDeliveryError(endpoint, None, f"Push request failed: {exc}") from exc
