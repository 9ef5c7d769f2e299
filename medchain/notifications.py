"""
In-process publish/subscribe for dashboard updates.

Services emit events (a report was minted, an appointment was approved);
subscribers registered in the same process get called synchronously.
HTTP clients can't subscribe, so every event is also kept in a short
rolling log that GET /v1/notifications reads from.
"""

import copy
import itertools
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable

logger = logging.getLogger(__name__)

RECENT_EVENTS_LIMIT = 200

NFT_REPORT_CREATED = "nft_report_created"
REPORT_STATUS_UPDATED = "report_status_updated"
NFT_TRANSFERRED = "nft_transferred"
APPOINTMENT_CREATED = "appointment_created"
APPOINTMENT_APPROVED = "appointment_approved"
APPOINTMENT_REJECTED = "appointment_rejected"
REPORTS_CLEARED = "reports_cleared"


class NotificationService:
    _listeners: dict[str, list[Callable[[dict], Any]]] = {}
    _recent: deque = deque(maxlen=RECENT_EVENTS_LIMIT)
    _ids = itertools.count(1)

    @classmethod
    def subscribe(cls, event: str, callback: Callable[[dict], Any]) -> None:
        cls._listeners.setdefault(event, []).append(callback)

    @classmethod
    def unsubscribe(cls, event: str, callback: Callable[[dict], Any]) -> None:
        if event in cls._listeners:
            cls._listeners[event] = [cb for cb in cls._listeners[event] if cb != callback]

    @classmethod
    def emit(cls, event: str, data: dict) -> None:
        logger.info("Notification: %s", event)

        cls._recent.append({
            "id": next(cls._ids),
            "event": event,
            "data": copy.deepcopy(data),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

        for callback in list(cls._listeners.get(event, [])):
            try:
                callback(data)
            except Exception:
                logger.exception("Subscriber for %s failed", event)

    @classmethod
    def recent(
        cls,
        event: str | None = None,
        wallet: str | None = None,
        limit: int = 50,
    ) -> list[dict]:
        """Newest-first slice of the event log, optionally filtered."""
        results = []
        for entry in reversed(cls._recent):
            if event and entry["event"] != event:
                continue
            if wallet and wallet not in (
                entry["data"].get("patient_wallet"),
                entry["data"].get("doctor_wallet"),
            ):
                continue
            results.append(entry)
            if len(results) >= limit:
                break
        return results

    @classmethod
    def reset(cls) -> None:
        cls._listeners.clear()
        cls._recent.clear()
