"""
WebSocket change feed.

Pushes row changes (messages, checkups, health logs) to subscribed principals.
Each event carries the row itself plus its id, so a client that sees the same
event twice can merge it idempotently instead of re-fetching the whole thread.

An event reaches a subscription only when:
    - the subscription is for the event's table,
    - its optional server-side filter (``column=eq.value``) matches the row,
    - the access policy lets the subscriber read the row.

Delivery is at-least-once and unordered across principals.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set
from uuid import UUID

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool

from healthsync.core.policy import AccessPolicy, Principal, cached_lookup
from healthsync.db.base import SessionLocal
from healthsync.helpers.enums import ChangeEvent, Operation, ResourceType
from healthsync.repository.repo_pairing import PairingRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeFilter:
    """Server-side row filter, written ``column=eq.value``."""
    column: str
    value: str

    @classmethod
    def parse(cls, expression: Optional[str]) -> Optional["ChangeFilter"]:
        if not expression:
            return None
        column, sep, rest = expression.partition('=')
        operator, dot, value = rest.partition('.')
        if not sep or not dot or operator != 'eq' or not column.strip() or not value:
            raise ValueError(f"Unsupported filter expression: {expression}")
        return cls(column=column.strip(), value=value)

    def matches(self, record: Any) -> bool:
        actual = getattr(record, self.column, None)
        actual = getattr(actual, "value", actual)
        return actual is not None and str(actual) == self.value


@dataclass
class Subscription:
    """
    One open WebSocket listening to one table.

    Attributes:
        websocket: The WebSocket instance
        principal: Who subscribed
        table: Table the subscription listens to
        change_filter: Optional row filter
        connected_at: Connection timestamp
        last_activity: Last delivery timestamp
        is_active: Whether connection is active
        event_count: Number of events delivered
        error_count: Number of failed deliveries
    """
    websocket: WebSocket
    principal: Principal
    table: ResourceType
    change_filter: Optional[ChangeFilter] = None
    connected_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    is_active: bool = True
    event_count: int = 0
    error_count: int = 0

    def __hash__(self) -> int:
        return hash(id(self.websocket))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Subscription):
            return False
        return self.websocket is other.websocket

    def wants(self, table: ResourceType, record: Any) -> bool:
        if not self.is_active or table is not self.table:
            return False
        return self.change_filter is None or self.change_filter.matches(record)

    def mark_delivered(self) -> None:
        self.event_count += 1
        self.last_activity = time.time()


class ChangeFeedManager:
    """
    Tracks change-feed subscriptions per principal and fans events out.

    Usage:
        feed = ChangeFeedManager()

        # In WebSocket endpoint
        await feed.connect(websocket, principal, ResourceType.MESSAGE)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await feed.disconnect(websocket)

        # After a write has been committed
        await feed.publish(ResourceType.MESSAGE, ChangeEvent.INSERT, message)
    """

    def __init__(self, max_connections_per_principal: int = 5):
        # principal id -> subscriptions
        self._subscriptions: Dict[UUID, Set[Subscription]] = {}
        # websocket -> subscription
        self._websocket_map: Dict[WebSocket, Subscription] = {}
        self._max_per_principal = max_connections_per_principal
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, principal: Principal, table: ResourceType,
                      change_filter: Optional[ChangeFilter] = None) -> Optional[Subscription]:
        async with self._lock:
            subscriptions = self._subscriptions.setdefault(principal.id, set())
            if len(subscriptions) >= self._max_per_principal:
                logger.warning(f"Max subscriptions reached for principal: {principal.id}")
                await websocket.close(code=4008, reason="Max connections reached")
                return None

            subscription = Subscription(
                websocket=websocket,
                principal=principal,
                table=table,
                change_filter=change_filter
            )
            subscriptions.add(subscription)
            self._websocket_map[websocket] = subscription
            await websocket.accept()

        logger.info(
            f"Change feed subscribed: principal={principal.id}, table={table.value}, "
            f"total={len(subscriptions)}"
        )
        return subscription

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            subscription = self._websocket_map.pop(websocket, None)
            if not subscription:
                return
            subscription.is_active = False

            subscriptions = self._subscriptions.get(subscription.principal.id)
            if subscriptions is not None:
                subscriptions.discard(subscription)
                if not subscriptions:
                    del self._subscriptions[subscription.principal.id]

        logger.info(
            f"Change feed unsubscribed: principal={subscription.principal.id}, "
            f"events={subscription.event_count}, errors={subscription.error_count}"
        )

    async def publish(self, table: ResourceType, event: ChangeEvent, record: Any,
                      policy: Optional[AccessPolicy] = None) -> int:
        """
        Deliver one committed change to every subscription allowed to see it.

        ``record`` must expose the row's columns as attributes. Without an
        explicit ``policy`` a short-lived session answers pairing questions.
        Policy checks run in the threadpool; only the sends happen on the loop.

        Returns:
            int: Number of subscriptions that received the event
        """
        candidates = [s for s in list(self._websocket_map.values()) if s.wants(table, record)]
        if not candidates:
            return 0

        recipients = await run_in_threadpool(_readable_by, candidates, table, record, policy)
        return await self._deliver(recipients, table, event, record)

    async def _deliver(self, recipients, table: ResourceType, event: ChangeEvent, record: Any) -> int:
        payload = {
            "table": table.value,
            "event": event.value,
            "id": str(record.id),
            "record": _serialize(record),
        }

        sent_count = 0
        dead = []
        for subscription in recipients:
            try:
                await subscription.websocket.send_json(payload)
                subscription.mark_delivered()
                sent_count += 1
            except Exception as e:
                subscription.error_count += 1
                dead.append(subscription)
                logger.warning(f"Failed to push to principal {subscription.principal.id}: {e}")

        for subscription in dead:
            await self.disconnect(subscription.websocket)

        return sent_count

    def get_principal_count(self, principal_id: UUID) -> int:
        return len(self._subscriptions.get(principal_id, set()))

    def get_total_connections(self) -> int:
        return len(self._websocket_map)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "total_connections": self.get_total_connections(),
            "principals_with_connections": len(self._subscriptions),
        }


def _readable_by(candidates, table: ResourceType, record: Any,
                 policy: Optional[AccessPolicy] = None) -> List[Subscription]:
    if policy is not None:
        return [s for s in candidates if policy.is_allowed(s.principal, Operation.READ, table, record)]

    db = SessionLocal()
    try:
        policy = AccessPolicy(is_paired=cached_lookup(PairingRepository(db).is_linked))
        return [s for s in candidates if policy.is_allowed(s.principal, Operation.READ, table, record)]
    finally:
        db.close()


def _serialize(record: Any) -> Dict[str, Any]:
    return jsonable_encoder(record)


# ==================== GLOBAL INSTANCE ====================

change_feed = ChangeFeedManager()
