"""Best-effort notification fan-out.

Creating a post enqueues a ``BroadcastJob`` on the ``NotificationDispatcher``
and returns immediately. The dispatcher's background task hands each job to
``NotificationFanout``, which sends to every registered subscription
concurrently, removes endpoints the push service reports as gone, and logs
everything else. Delivery is at-most-once: nothing is retried.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from huddle.core.errors import PushDeliveryError, StorageFailure
from huddle.core.settings import settings
from huddle.db.session import SessionLocal
from huddle.models.notification_subscription import NotificationSubscription
from huddle.repositories.subscription_repo import SubscriptionRepository
from huddle.services.push import PushSender, build_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BroadcastJob:
    """One notification to send to every subscriber."""

    title: str
    body: str
    url: str = "/"


@dataclass(frozen=True)
class FanoutResult:
    """Outcome counts for one broadcast."""

    sent: int = 0
    pruned: int = 0
    failed: int = 0


class NotificationFanout:
    """Sends a broadcast to all subscriptions and prunes dead endpoints."""

    def __init__(
        self,
        sender: PushSender | None = None,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        self.sender = sender or PushSender()
        self._session_factory = session_factory

    async def broadcast(self, title: str, body: str, url: str | None = None) -> FanoutResult:
        """Deliver to every subscription; individual failures never abort the batch."""
        if not self.sender.enabled:
            logger.debug("VAPID keys not configured; skipping broadcast %r", title)
            return FanoutResult()

        payload = build_payload(title, body, url)
        with self._session_factory() as db:
            repo = SubscriptionRepository(db)
            subscriptions = repo.list_all()
            if not subscriptions:
                return FanoutResult()

            outcomes = await asyncio.gather(
                *(self._deliver(sub, payload) for sub in subscriptions),
                return_exceptions=True,
            )

            sent = pruned = failed = 0
            for subscription, outcome in zip(subscriptions, outcomes, strict=True):
                if outcome is None:
                    sent += 1
                elif isinstance(outcome, PushDeliveryError) and outcome.gone:
                    if self._prune(repo, subscription.endpoint):
                        pruned += 1
                    else:
                        failed += 1
                else:
                    failed += 1
                    logger.warning(
                        "Push delivery to %s failed: %s",
                        _short(subscription.endpoint),
                        outcome,
                    )

        logger.info("Broadcast %r: sent=%d pruned=%d failed=%d", title, sent, pruned, failed)
        return FanoutResult(sent=sent, pruned=pruned, failed=failed)

    async def _deliver(self, subscription: NotificationSubscription, payload: str) -> None:
        await self.sender.send(subscription.to_subscription_info(), payload)

    def _prune(self, repo: SubscriptionRepository, endpoint: str) -> bool:
        try:
            repo.delete_by_endpoint(endpoint)
        except StorageFailure:
            return False
        logger.info("Removed expired push subscription %s", _short(endpoint))
        return True


def _short(endpoint: str) -> str:
    return endpoint if len(endpoint) <= 48 else f"{endpoint[:48]}..."


class NotificationDispatcher:
    """Background worker draining broadcast jobs off an in-process queue.

    ``enqueue`` never blocks and never raises, so request handlers can hand off
    a job without being affected by how (or whether) it is delivered.
    """

    def __init__(
        self,
        fanout: NotificationFanout | None = None,
        maxsize: int | None = None,
    ) -> None:
        self.fanout = fanout or NotificationFanout()
        self._maxsize = settings.notification_queue_size if maxsize is None else maxsize
        self._queue: asyncio.Queue[BroadcastJob] | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background drain loop."""
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=max(0, self._maxsize))
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the loop; jobs still queued are dropped."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        self._queue = None

    def enqueue(self, job: BroadcastJob) -> bool:
        """Queue ``job`` for delivery. Returns False if it had to be dropped."""
        if self._queue is None or not self.running:
            logger.warning("Notification dispatcher not running; dropping %r", job.title)
            return False
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            logger.warning("Notification queue full; dropping %r", job.title)
            return False
        return True

    async def drain(self) -> None:
        """Wait until every queued job has been processed."""
        if self._queue is not None:
            await self._queue.join()

    async def _run(self) -> None:
        assert self._queue is not None
        queue = self._queue
        while True:
            job = await queue.get()
            try:
                await self.fanout.broadcast(job.title, job.body, job.url)
            except Exception:
                logger.exception("Broadcast %r failed", job.title)
            finally:
                queue.task_done()
