"""Terminal sweet-spot timing check.

A cursor swings across a bar; pressing Enter while it is near the center
scores PERFECT or GOOD. Doing nothing for the whole window scores MISS.
"""

import math
import select
import sys
import time
from typing import Callable, Optional

from rich.console import Console
from rich.live import Live

from nancymon.cli.ui.displays import render_timing_bar
from nancymon.core.moves import TimingResult
from nancymon.utils.config import BattleConfig, config

FRAME_SECONDS = 1 / 30


def cursor_position(elapsed: float, cfg: BattleConfig | None = None) -> float:
    """Cursor offset from the center after `elapsed` seconds."""
    cfg = cfg or config
    return math.sin(elapsed * cfg.timing_cursor_speed) * cfg.timing_bar_half_width


def classify_position(position: float, cfg: BattleConfig | None = None) -> TimingResult:
    cfg = cfg or config
    distance = abs(position)
    if distance < cfg.timing_perfect_zone:
        return TimingResult.PERFECT
    if distance < cfg.timing_good_zone:
        return TimingResult.GOOD
    return TimingResult.MISS


def judge(elapsed: float, cfg: BattleConfig | None = None) -> TimingResult:
    """Score a press made `elapsed` seconds into the check."""
    cfg = cfg or config
    if elapsed >= cfg.timing_window_seconds:
        return TimingResult.MISS
    return classify_position(cursor_position(elapsed, cfg), cfg)


def _has_descriptor(stream) -> bool:
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return True


def wait_for_enter(timeout: float, stream=None) -> bool:
    """True if a line arrived on the stream within `timeout` seconds.

    Terminals and pipes are polled with select, so an open pipe with
    nothing in it never blocks past the timeout. In-memory streams
    (no file descriptor) are read directly: the line is either already
    there or never coming.
    """
    stream = stream if stream is not None else sys.stdin
    if _has_descriptor(stream):
        ready, _, _ = select.select([stream], [], [], timeout)
        if not ready:
            return False
    line = stream.readline()
    if not line:
        # EOF
        time.sleep(timeout)
        return False
    return True


class SweetSpotTimingCheck:
    """Animated timing check. Returns MISS once the window runs out."""

    def __init__(
        self,
        console: Optional[Console] = None,
        cfg: BattleConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        key_pressed: Callable[[float], bool] = wait_for_enter,
    ):
        self.console = console or Console()
        self.cfg = cfg or config
        self.clock = clock
        self.key_pressed = key_pressed

    def __call__(self) -> TimingResult:
        start = self.clock()
        with Live(
            render_timing_bar(0.0, self.cfg),
            console=self.console,
            transient=True,
            auto_refresh=False,
        ) as live:
            while True:
                elapsed = self.clock() - start
                if elapsed >= self.cfg.timing_window_seconds:
                    return TimingResult.MISS
                live.update(render_timing_bar(cursor_position(elapsed, self.cfg), self.cfg), refresh=True)
                if self.key_pressed(FRAME_SECONDS):
                    return judge(self.clock() - start, self.cfg)
