"""
Availability trigger engine.

When a medicine becomes available at a pharmacy, every subscription waiting
on that (pharmacy, medicine name) pair gets its ``triggered`` flag flipped.
Delivery is somebody else's job: an external listener watches the flag and
later sets ``notified`` once the user has been told.
"""
import enum
import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import NOTIFY_FANOUT_WORKERS, NOTIFY_MAX_WORKERS
from models.medicine_subscription import MedicineSubscription
from models.user import User

logger = logging.getLogger(__name__)

_BG_EXECUTOR = ThreadPoolExecutor(max_workers=NOTIFY_MAX_WORKERS, thread_name_prefix="availability")


def run_in_background(fn, *args, **kwargs) -> Future | None:
    try:
        return _BG_EXECUTOR.submit(fn, *args, **kwargs)
    except RuntimeError as exc:
        logger.error("Background task submit failed: %s", exc)
        return None


class TriggerOutcome(str, enum.Enum):
    triggered = "triggered"
    skipped = "skipped"


@dataclass
class TriggerSummary:
    matched: int = 0
    triggered: int = 0
    skipped: int = 0
    failed: int = 0


class AvailabilityNotifier:
    def __init__(self, session_factory, max_fanout_workers: int = NOTIFY_FANOUT_WORKERS):
        self._session_factory = session_factory
        self._max_fanout_workers = max(1, max_fanout_workers)

    def check_availability(self, pharmacy_id: str, medicine_name: str, pharmacy_name: str = "") -> TriggerSummary:
        """Trigger every waiting subscription for the pair.

        Each subscription is handled in its own session on a bounded pool.
        One failing item is logged and counted; it never stops the others.
        Returns once every match has been attempted.
        """
        logger.info("Checking subscriptions for %r at pharmacy %s", medicine_name, pharmacy_id)
        db = self._session_factory()
        try:
            subscription_ids = [
                row.id
                for row in db.query(MedicineSubscription.id)
                .filter(
                    MedicineSubscription.pharmacy_id == pharmacy_id,
                    MedicineSubscription.medicine_name == medicine_name,
                    MedicineSubscription.triggered.is_(False),
                )
                .all()
            ]
        finally:
            db.close()

        summary = TriggerSummary(matched=len(subscription_ids))
        if not subscription_ids:
            logger.info("No waiting subscriptions for %r at pharmacy %s", medicine_name, pharmacy_id)
            return summary

        workers = min(self._max_fanout_workers, len(subscription_ids))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="availability-fanout") as pool:
            futures = {pool.submit(self._trigger_one, sid): sid for sid in subscription_ids}
            for future in as_completed(futures):
                sid = futures[future]
                try:
                    outcome = future.result()
                except Exception:
                    logger.exception("Triggering subscription %s failed", sid)
                    summary.failed += 1
                    continue
                if outcome is TriggerOutcome.triggered:
                    summary.triggered += 1
                else:
                    summary.skipped += 1

        logger.info(
            "Availability check for %r at %s: matched=%d triggered=%d skipped=%d failed=%d",
            medicine_name,
            pharmacy_name or pharmacy_id,
            summary.matched,
            summary.triggered,
            summary.skipped,
            summary.failed,
        )
        return summary

    def _trigger_one(self, subscription_id: str) -> TriggerOutcome:
        db = self._session_factory()
        try:
            sub = db.get(MedicineSubscription, subscription_id)
            if not sub or sub.triggered:
                return TriggerOutcome.skipped
            user = db.get(User, sub.user_id)
            if not user:
                logger.warning("User %s not found for subscription %s", sub.user_id, subscription_id)
                return TriggerOutcome.skipped
            if user.notifications_enabled is False:
                logger.info("User %s has notifications disabled", user.id)
                return TriggerOutcome.skipped

            # Conditional update keeps the flag monotonic when two checks race.
            updated = (
                db.query(MedicineSubscription)
                .filter(
                    MedicineSubscription.id == subscription_id,
                    MedicineSubscription.triggered.is_(False),
                )
                .update(
                    {"triggered": True, "triggered_at": datetime.now(timezone.utc)},
                    synchronize_session=False,
                )
            )
            db.commit()
            return TriggerOutcome.triggered if updated else TriggerOutcome.skipped
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def schedule(self, pharmacy_id: str, medicine_name: str, pharmacy_name: str = "") -> Future | None:
        """Run ``check_availability`` detached. The outcome only reaches the log."""
        future = run_in_background(self.check_availability, pharmacy_id, medicine_name, pharmacy_name)
        if future is not None:
            future.add_done_callback(partial(_log_detached_failure, pharmacy_id, medicine_name))
        return future


def _log_detached_failure(pharmacy_id: str, medicine_name: str, future: Future) -> None:
    if future.cancelled():
        logger.warning("Availability check for %r at %s was cancelled", medicine_name, pharmacy_id)
        return
    exc = future.exception()
    if exc is not None:
        logger.error(
            "Availability check for %r at %s failed",
            medicine_name,
            pharmacy_id,
            exc_info=(type(exc), exc, exc.__traceback__),
        )


def list_pending(db: Session, pharmacy_id: str) -> list[MedicineSubscription]:
    try:
        return (
            db.query(MedicineSubscription)
            .filter(
                MedicineSubscription.pharmacy_id == pharmacy_id,
                MedicineSubscription.notified.is_(False),
            )
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Could not load pending subscriptions for pharmacy %s", pharmacy_id)
        db.rollback()
        return []
