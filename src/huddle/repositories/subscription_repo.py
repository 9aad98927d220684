"""Data access helpers for push notification subscriptions."""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from huddle.core.errors import StorageFailure
from huddle.models.notification_subscription import NotificationSubscription

__all__ = ["SubscriptionRepository"]

logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """Upsert/delete access to ``NotificationSubscription`` rows keyed by endpoint."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[NotificationSubscription]:
        """Return every registered subscription."""
        return list(self.session.execute(select(NotificationSubscription)).scalars())

    def get(self, endpoint: str) -> NotificationSubscription | None:
        """Return the subscription for ``endpoint`` if any."""
        return self.session.get(NotificationSubscription, endpoint)

    def upsert(
        self,
        *,
        endpoint: str,
        p256dh: str,
        auth: str,
        session_id: str | None,
    ) -> NotificationSubscription:
        """Create the subscription or replace the keys of an existing one."""
        try:
            subscription = self.get(endpoint)
            if subscription is None:
                subscription = NotificationSubscription(
                    endpoint=endpoint,
                    p256dh=p256dh,
                    auth=auth,
                    session_id=session_id,
                )
                self.session.add(subscription)
            else:
                subscription.p256dh = p256dh
                subscription.auth = auth
                subscription.session_id = session_id
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to upsert push subscription")
            raise StorageFailure("Could not save subscription") from exc
        self.session.refresh(subscription)
        return subscription

    def delete_by_endpoint(self, endpoint: str) -> bool:
        """Delete the subscription for ``endpoint``; missing rows are not an error.

        Returns:
            True if a row was removed.
        """
        try:
            result = self.session.execute(
                delete(NotificationSubscription).where(
                    NotificationSubscription.endpoint == endpoint
                )
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to delete push subscription")
            raise StorageFailure("Could not delete subscription") from exc
        return bool(result.rowcount)
