"""ScrubPlayer - slideshow playback over a chronologically sorted photo list.

The player keeps a continuous ``position`` in ``[0, count - 1]`` and a
discrete ``index = floor(position)``. While playing, each tick advances the
position by ``elapsed * speed / seconds_per_item``; reaching the last photo
clamps the position and stops playback. Starting again from the last photo
rewinds to the first.

The player is driven by a single tick source. Every public method takes the
same lock, so a tick can never interleave with a manual scrub, start or stop.
Index-change listeners are called after the lock is released.

Example:
    >>> player = ScrubPlayer(count=10)
    >>> player.add_listener(lambda index: print(f"show photo {index}"))
    >>> player.start(now=0.0)
    >>> player.tick(now=2.0)
    show photo 1
    1
"""

from __future__ import annotations

import logging
import math
import threading
import time
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

IndexListener = Callable[[int], None]

DEFAULT_SECONDS_PER_ITEM = 2.0
DEFAULT_MAX_SPEED = 3


class PlaybackState(str, Enum):
    """Playback state of a ScrubPlayer."""

    STOPPED = "stopped"
    PLAYING = "playing"


class ScrubPlayer:
    """Continuous playback position over ``count`` photos.

    Attributes:
        seconds_per_item: Wall-clock seconds per photo at 1x speed.
        max_speed: Highest speed multiplier before cycling back to 1x.

    Args:
        count: Number of photos in the sequence.
        seconds_per_item: Wall-clock seconds per photo at 1x speed.
        max_speed: Highest speed multiplier.
        clock: Monotonic time source used when ticks carry no timestamp.
    """

    def __init__(
        self,
        count: int,
        seconds_per_item: float = DEFAULT_SECONDS_PER_ITEM,
        max_speed: int = DEFAULT_MAX_SPEED,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if count < 0:
            raise ValueError("count must not be negative")
        if seconds_per_item <= 0:
            raise ValueError("seconds_per_item must be positive")
        if max_speed < 1:
            raise ValueError("max_speed must be at least 1")

        self.seconds_per_item = seconds_per_item
        self.max_speed = max_speed
        self._clock = clock

        self._count = count
        self._position = 0.0
        self._index = 0
        self._speed = 1
        self._state = PlaybackState.STOPPED
        self._last_tick: float | None = None

        self._lock = threading.Lock()
        self._listeners: list[IndexListener] = []

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def count(self) -> int:
        return self._count

    @property
    def position(self) -> float:
        return self._position

    @property
    def index(self) -> int:
        return self._index

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def last_index(self) -> int:
        return max(self._count - 1, 0)

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_listener(self, listener: IndexListener) -> None:
        """Register a callback invoked with the new index on every change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: IndexListener) -> None:
        self._listeners.remove(listener)

    def _notify(self, previous: int, index: int) -> None:
        if index == previous:
            return
        for listener in list(self._listeners):
            listener(index)

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self, now: float | None = None) -> None:
        """Begin playback, rewinding first if parked on the last photo.

        Does nothing for an empty sequence or when already playing.
        """
        with self._lock:
            previous = self._index
            self._start_locked(now)
            index = self._index
        self._notify(previous, index)

    def stop(self) -> None:
        """Stop playback and snap the position back to the current index."""
        with self._lock:
            self._stop_locked()

    def toggle(self, now: float | None = None) -> None:
        """Start when stopped, stop when playing."""
        with self._lock:
            previous = self._index
            if self._state is PlaybackState.PLAYING:
                self._stop_locked()
            else:
                self._start_locked(now)
            index = self._index
        self._notify(previous, index)

    def _start_locked(self, now: float | None) -> None:
        if self._count == 0:
            logger.debug("Ignoring start() on an empty sequence")
            return
        if self._state is PlaybackState.PLAYING:
            return
        if self._index == self.last_index:
            self._position = 0.0
            self._index = 0
        self._state = PlaybackState.PLAYING
        self._last_tick = self._clock() if now is None else now
        logger.debug(f"Playback started at index {self._index}, speed {self._speed}x")

    def _stop_locked(self) -> None:
        if self._state is PlaybackState.PLAYING:
            logger.debug(f"Playback stopped at index {self._index}")
        self._state = PlaybackState.STOPPED
        self._position = float(self._index)
        self._last_tick = None

    # =========================================================================
    # Time Driven
    # =========================================================================

    def tick(self, now: float | None = None) -> int:
        """Advance by the wall-clock time elapsed since the previous tick.

        Args:
            now: Current time in seconds on the player's clock.

        Returns:
            The index after the tick.
        """
        with self._lock:
            previous = self._index
            if self._state is PlaybackState.PLAYING:
                now = self._clock() if now is None else now
                elapsed = now - self._last_tick
                self._last_tick = now
                self._advance_locked(elapsed)
            index = self._index
        self._notify(previous, index)
        return index

    def advance(self, elapsed_seconds: float) -> int:
        """Advance by an explicit elapsed time. No-op unless playing."""
        with self._lock:
            previous = self._index
            if self._state is PlaybackState.PLAYING:
                self._advance_locked(elapsed_seconds)
            index = self._index
        self._notify(previous, index)
        return index

    def _advance_locked(self, elapsed_seconds: float) -> None:
        self._position += max(elapsed_seconds, 0.0) * self._speed / self.seconds_per_item
        if self._position >= self.last_index:
            self._position = float(self.last_index)
            self._index = self.last_index
            self._stop_locked()
        else:
            self._index = math.floor(self._position)

    # =========================================================================
    # Manual Control
    # =========================================================================

    def scrub(self, position: float) -> int:
        """Move to a position chosen by the user.

        The position is clamped to the sequence. Playback state is left
        unchanged.

        Returns:
            The new index.
        """
        with self._lock:
            previous = self._index
            self._position = min(max(float(position), 0.0), float(self.last_index))
            self._index = math.floor(self._position)
            index = self._index
        self._notify(previous, index)
        return index

    def cycle_speed(self, now: float | None = None) -> int:
        """Step the speed multiplier 1x -> 2x -> ... -> max -> 1x.

        While playing, the tick reference is reset so the elapsed time is
        not counted at the new speed.

        Returns:
            The new speed multiplier.
        """
        with self._lock:
            self._speed = 1 if self._speed >= self.max_speed else self._speed + 1
            if self._state is PlaybackState.PLAYING:
                self._last_tick = self._clock() if now is None else now
            return self._speed

    def set_count(self, count: int) -> None:
        """Resize the sequence after photos are added or removed."""
        if count < 0:
            raise ValueError("count must not be negative")
        with self._lock:
            previous = self._index
            self._count = count
            if count == 0:
                self._stop_locked()
            self._position = min(self._position, float(self.last_index))
            self._index = math.floor(self._position)
            index = self._index
        self._notify(previous, index)
