"""
Playback Clock for Track Playback

This module maps wall-clock progress onto track time. A running clock moves
its cursor forward by elapsed real time multiplied by the speed, notifies
subscribers with a tick at a fixed cadence and stops itself at the end of the
track. Seeks and speed changes are synchronous and clamped.
"""

import itertools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
from . import constants
from .errors import ClockDisposedError, EmptyTrackError
from .track import TimeIndexedTrack
from .track_point import TrackPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tick:
    """Notification delivered to subscribers, carrying the cursor time."""
    time: float


TickHandler = Callable[[Tick], None]


class PlaybackClock:
    """
    Transport controller for replaying one track.

    The cursor only changes through start/stop/restart/set_cursor and the
    clock's own advancement. A timer thread calls advance() every
    tick_interval seconds while running. Passing tick_interval=None disables
    the timer so a host with its own frame loop can call advance() itself.

    Args:
        track: Track to replay. Must hold at least one point.
        speed: Initial speed multiplier, clamped to [MIN_SPEED, MAX_SPEED].
        tick_interval: Seconds between timer wake-ups, or None for no timer.
        time_source: Monotonic clock returning seconds. Default perf_counter.

    Raises:
        EmptyTrackError: If the track has no points.
    """

    def __init__(self, track: TimeIndexedTrack, speed: float = constants.DEFAULT_SPEED,
                 tick_interval: Optional[float] = constants.TICK_INTERVAL_S,
                 time_source: Callable[[], float] = time.perf_counter) -> None:
        if track.is_empty():
            raise EmptyTrackError("create playback clock")

        self._track = track
        self._lock = threading.RLock()
        self._time_source = time_source
        self._tick_interval = tick_interval
        self._speed = self._clamp_speed(speed)
        self._cursor = track.get_start_track_point().time
        self._running = False
        self._last_update = 0.0
        self._disposed = False

        self._subscribers: Dict[int, TickHandler] = {}
        self._tokens = itertools.count(1)

        self._timer_thread: Optional[threading.Thread] = None
        self._timer_stop: Optional[threading.Event] = None

    @property
    def track(self) -> TimeIndexedTrack:
        return self._track

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, handler: TickHandler) -> int:
        """
        Register a tick handler.

        Handlers run on the thread that produced the tick (the timer thread
        for automatic ticks) and must return quickly. Ticks are never queued.

        Args:
            handler: Callable receiving a Tick.

        Returns:
            Token to pass to unsubscribe().
        """
        with self._lock:
            self._ensure_usable()
            token = next(self._tokens)
            self._subscribers[token] = handler
            return token

    def unsubscribe(self, token: int) -> bool:
        """Remove a handler. Returns False if the token was not registered."""
        with self._lock:
            self._ensure_usable()
            return self._subscribers.pop(token, None) is not None

    def _emit(self, tick: Tick) -> None:
        with self._lock:
            handlers = list(self._subscribers.values())
        for handler in handlers:
            try:
                handler(tick)
            except Exception:
                logger.exception("Tick handler %r failed at time %s", handler, tick.time)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin advancing the cursor. Does nothing if already running."""
        with self._lock:
            self._ensure_usable()
            if self._running:
                return
            self._running = True
            self._last_update = self._time_source()
            self._start_timer()
            logger.info("Playback started at %s (speed x%s)", self._cursor, self._speed)

    def stop(self) -> None:
        """Halt advancement. No automatic ticks follow until start()."""
        with self._lock:
            self._ensure_usable()
            if not self._running:
                return
            self._running = False
            thread = self._halt_timer()
            logger.info("Playback stopped at %s", self._cursor)
        self._join_timer(thread)

    def restart(self) -> None:
        """Rewind to the start of the track and run, discarding prior progress."""
        with self._lock:
            self._ensure_usable()
            start_time, _ = self._bounds()
            self._cursor = start_time
            self._last_update = self._time_source()
            if not self._running:
                self._running = True
                self._start_timer()
            tick = Tick(self._cursor)
            logger.info("Playback restarted at %s", self._cursor)
        self._emit(tick)

    def set_cursor(self, time_value: float) -> None:
        """
        Seek to a track time, clamped into the track's bounds.

        Emits one tick synchronously, whether or not the clock is running.

        Args:
            time_value: Target track time.
        """
        with self._lock:
            self._ensure_usable()
            target = self._clamp_cursor(float(time_value))
            if target != time_value:
                logger.debug("Seek to %s clamped to %s", time_value, target)
            self._cursor = target
            if self._running:
                self._last_update = self._time_source()
            tick = Tick(self._cursor)
        self._emit(tick)

    def advance(self) -> Optional[Tick]:
        """
        Run one advancement step.

        Moves the cursor by the real time elapsed since the previous step
        multiplied by the speed. Reaching the end of the track stops the clock
        and produces the final tick at the end time.

        Returns:
            The emitted Tick, or None if the clock is stopped, disposed, or the
            cursor did not move.
        """
        with self._lock:
            if self._disposed or not self._running:
                return None

            now = self._time_source()
            elapsed = max(0.0, now - self._last_update)
            self._last_update = now

            start_time, end_time = self._bounds()
            previous = max(self._cursor, start_time)
            cursor = min(previous + elapsed * self._speed, end_time)
            finished = cursor >= end_time

            if finished:
                self._running = False
                self._halt_timer()
            elif cursor <= previous:
                return None

            self._cursor = cursor
            tick = Tick(cursor)

        if finished:
            logger.info("Playback reached end of track at %s", cursor)
        else:
            logger.debug("Tick at %s", cursor)
        self._emit(tick)
        return tick

    def dispose(self) -> None:
        """Stop the timer and drop all subscriptions. The clock is unusable afterwards."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            self._running = False
            self._subscribers.clear()
            thread = self._halt_timer()
            logger.info("Playback clock disposed")
        self._join_timer(thread)

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------

    def slow_speed(self) -> float:
        """Divide the speed by SPEED_FACTOR. Returns the new speed."""
        with self._lock:
            self._ensure_usable()
            return self._apply_speed(self._speed / constants.SPEED_FACTOR)

    def quick_speed(self) -> float:
        """Multiply the speed by SPEED_FACTOR. Returns the new speed."""
        with self._lock:
            self._ensure_usable()
            return self._apply_speed(self._speed * constants.SPEED_FACTOR)

    def set_speed(self, speed: float) -> float:
        with self._lock:
            self._ensure_usable()
            return self._apply_speed(speed)

    def get_speed(self) -> float:
        with self._lock:
            self._ensure_usable()
            return self._speed

    def _apply_speed(self, speed: float) -> float:
        self._speed = self._clamp_speed(speed)
        return self._speed

    @staticmethod
    def _clamp_speed(speed: float) -> float:
        clamped = max(constants.MIN_SPEED, min(constants.MAX_SPEED, float(speed)))
        if clamped != speed:
            logger.debug("Speed %s clamped to %s", speed, clamped)
        return clamped

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def is_running(self) -> bool:
        with self._lock:
            self._ensure_usable()
            return self._running

    def get_cur_time(self) -> float:
        with self._lock:
            self._ensure_usable()
            return self._clamp_cursor(self._cursor)

    def get_start_time(self) -> float:
        with self._lock:
            self._ensure_usable()
            return self._bounds()[0]

    def get_end_time(self) -> float:
        with self._lock:
            self._ensure_usable()
            return self._bounds()[1]

    def get_track_points(self) -> List[TrackPoint]:
        """Visible window of the track at the cursor."""
        return self._track.get_track_points_before_time(self.get_cur_time())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_usable(self) -> None:
        if self._disposed:
            raise ClockDisposedError()

    def _bounds(self) -> Tuple[float, float]:
        # Derived on every call so points appended during playback extend the run
        return (self._track.get_start_track_point().time,
                self._track.get_end_track_point().time)

    def _clamp_cursor(self, value: float) -> float:
        start_time, end_time = self._bounds()
        return max(start_time, min(end_time, value))

    def _start_timer(self) -> None:
        if self._tick_interval is None:
            return
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run_timer,
            args=(stop_event, float(self._tick_interval)),
            name="playback-clock",
            daemon=True,
        )
        self._timer_stop = stop_event
        self._timer_thread = thread
        thread.start()

    def _halt_timer(self) -> Optional[threading.Thread]:
        thread = self._timer_thread
        if self._timer_stop is not None:
            self._timer_stop.set()
        self._timer_stop = None
        self._timer_thread = None
        return thread

    @staticmethod
    def _join_timer(thread: Optional[threading.Thread]) -> None:
        # A handler running on the timer thread may call stop(); never join self
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run_timer(self, stop_event: threading.Event, interval: float) -> None:
        while not stop_event.wait(interval):
            self.advance()
