"""
Live device position stream.

A PositioningFacility is whatever produces fixes (a GPS feed, a websocket,
a test queue). LivePositionTracker is the only thing that talks to it:
it owns at most one watch, filters bad or stale fixes, and guarantees that
no callback runs once stop() has returned.
"""

import asyncio
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Hashable, Optional, Union

from . import config
from .errors import TrackerError, TrackerErrorCode
from .models import PositionSample

logger = logging.getLogger(__name__)

OnSample = Callable[[PositionSample], None]
OnError = Callable[[TrackerError], None]
Clock = Callable[[], datetime]


@dataclass(frozen=True)
class TrackerOptions:
    high_accuracy: bool = config.TRACKER_HIGH_ACCURACY
    max_sample_age_ms: int = config.TRACKER_MAX_AGE_MS  # 0 disables the staleness check
    timeout_ms: int = config.TRACKER_TIMEOUT_MS  # 0 waits forever
    max_accuracy_meters: Optional[float] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PositioningFacility(ABC):
    """Platform source of position fixes, modelled on a watch/clear-watch API."""

    supported: bool = True

    @abstractmethod
    def watch(
        self,
        options: TrackerOptions,
        on_position: Callable[[PositionSample], None],
        on_error: Callable[[Exception], None],
    ) -> Hashable:
        """Start delivering fixes; returns an id for clear_watch()."""

    @abstractmethod
    def clear_watch(self, watch_id: Hashable) -> None:
        """Stop delivering fixes for ``watch_id``. Unknown ids are ignored."""


@dataclass
class _Watch:
    queue: asyncio.Queue
    task: Optional[asyncio.Task] = None


class QueuePositioningFacility(PositioningFacility):
    """
    asyncio facility fed by publish()/fail().

    Every watch gets its own queue and pump task, so fixes fan out to all
    watchers. When nothing arrives within ``timeout_ms`` the watcher gets a
    single TIMEOUT error and keeps waiting for the next fix.
    """

    def __init__(self, supported: bool = True):
        self.supported = supported
        self._watches: Dict[int, _Watch] = {}
        self._ids = itertools.count(1)

    @property
    def active_watches(self) -> int:
        return len(self._watches)

    def watch(self, options, on_position, on_error) -> int:
        loop = asyncio.get_running_loop()
        watch_id = next(self._ids)
        w = _Watch(queue=asyncio.Queue())
        w.task = loop.create_task(self._pump(w.queue, options, on_position, on_error))
        self._watches[watch_id] = w
        return watch_id

    def clear_watch(self, watch_id) -> None:
        w = self._watches.pop(watch_id, None)
        if w is not None and w.task is not None:
            w.task.cancel()

    def publish(self, sample: PositionSample) -> None:
        for w in list(self._watches.values()):
            w.queue.put_nowait(sample)

    def fail(self, error: Exception) -> None:
        for w in list(self._watches.values()):
            w.queue.put_nowait(error)

    async def _pump(self, queue: asyncio.Queue, options: TrackerOptions, on_position, on_error) -> None:
        timeout_s = options.timeout_ms / 1000.0 if options.timeout_ms > 0 else None
        timed_out = False
        while True:
            try:
                if timeout_s is None or timed_out:
                    item = await queue.get()
                else:
                    item = await asyncio.wait_for(queue.get(), timeout_s)
            except asyncio.TimeoutError:
                timed_out = True
                item = TrackerError(
                    TrackerErrorCode.TIMEOUT,
                    f"No position within {options.timeout_ms} ms",
                )
            else:
                timed_out = False

            try:
                if isinstance(item, Exception):
                    on_error(item)
                else:
                    on_position(item)
            except Exception:
                logger.exception("[TRACKER] Position callback failed")


class TrackerHandle:
    """Returned by LivePositionTracker.start(); stop() is safe to call repeatedly."""

    def __init__(self, tracker: "LivePositionTracker", token: object):
        self._tracker = tracker
        self._token = token

    @property
    def active(self) -> bool:
        return self._tracker._token is self._token

    def stop(self) -> None:
        self._tracker._stop(self._token)


class LivePositionTracker:
    """
    One subscription at a time over a PositioningFacility.

    A second start() while running is a no-op that returns the existing
    handle. Samples failing the coordinate range, staleness or accuracy
    checks are dropped and logged at debug level; errors go to ``on_error``
    and the stream carries on.
    """

    def __init__(
        self,
        facility: PositioningFacility,
        options: Optional[TrackerOptions] = None,
        clock: Clock = _utcnow,
    ):
        self.facility = facility
        self.options = options or TrackerOptions()
        self.clock = clock
        # deliveries and stop() take the same lock, so a delivery either
        # finishes before stop() returns or sees the cleared token
        self._lock = threading.RLock()
        self._token: Optional[object] = None
        self._watch_id: Optional[Hashable] = None
        self._handle: Optional[TrackerHandle] = None

    @property
    def running(self) -> bool:
        return self._token is not None

    def start(self, on_sample: OnSample, on_error: Optional[OnError] = None) -> Optional[TrackerHandle]:
        """
        Subscribe to the facility.

        Returns None without subscribing when the facility reports that
        positioning is unsupported. An error raised while subscribing
        (e.g. permission denied) is passed to ``on_error`` as a TrackerError
        and None is returned.
        """
        if not self.facility.supported:
            logger.info("[TRACKER] Positioning is not supported on this platform")
            return None

        with self._lock:
            if self._handle is not None:
                logger.debug("[TRACKER] Already running, start() ignored")
                return self._handle

            token = object()
            self._token = token

            def deliver_sample(sample: PositionSample) -> None:
                with self._lock:
                    if self._token is not token:
                        return
                    if self._accept(sample):
                        on_sample(sample)

            def deliver_error(error: Exception) -> None:
                with self._lock:
                    if self._token is not token or on_error is None:
                        return
                    on_error(_as_tracker_error(error))

            try:
                self._watch_id = self.facility.watch(self.options, deliver_sample, deliver_error)
            except Exception as e:
                self._token = None
                logger.warning("[TRACKER] Could not start position watch: %s", e)
                if on_error is not None:
                    on_error(_as_tracker_error(e))
                return None

            self._handle = TrackerHandle(self, token)
            logger.debug("[TRACKER] Watching positions (watch id %s)", self._watch_id)
            return self._handle

    def stop(self) -> None:
        """Unsubscribe. No-op when not running."""
        self._stop(self._token)

    def _stop(self, token: Optional[object]) -> None:
        with self._lock:
            if token is None or self._token is not token:
                return
            watch_id = self._watch_id
            self._token = None
            self._watch_id = None
            self._handle = None
            self.facility.clear_watch(watch_id)
            logger.debug("[TRACKER] Stopped watch %s", watch_id)

    def _accept(self, sample: PositionSample) -> bool:
        if not sample.coordinate.is_valid():
            logger.debug("[TRACKER] Dropping out-of-range fix %s", sample.coordinate.as_tuple())
            return False

        if self.options.max_sample_age_ms > 0:
            age_ms = (_as_utc(self.clock()) - _as_utc(sample.captured_at)).total_seconds() * 1000.0
            if age_ms > self.options.max_sample_age_ms:
                logger.debug("[TRACKER] Dropping stale fix (%.0f ms old)", age_ms)
                return False

        limit = self.options.max_accuracy_meters
        if limit is not None and sample.accuracy_meters is not None and sample.accuracy_meters > limit:
            logger.debug("[TRACKER] Dropping imprecise fix (%.1f m)", sample.accuracy_meters)
            return False

        return True


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _as_tracker_error(error: Union[TrackerError, Exception]) -> TrackerError:
    if isinstance(error, TrackerError):
        return error
    return TrackerError(TrackerErrorCode.POSITION_UNAVAILABLE, str(error))
