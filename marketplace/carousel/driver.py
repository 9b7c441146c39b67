"""
Runs a carousel state machine against a scheduler.

The scheduler only needs ``call_later(delay_seconds, callback)`` returning a
handle with ``cancel()``, which an asyncio event loop provides. The driver
owns at most one autoplay timer, one progress interval and one resume timer
at any moment.

The API only serves the initial carousel snapshot; the driver is the runtime
counterpart for clients that embed this package and own the real clocks and
video elements.
"""
import logging
from typing import Callable

from marketplace.carousel.machine import (
    CancelAutoplay,
    CancelResume,
    CarouselConfig,
    CarouselState,
    Mode,
    Mount,
    PauseVideo,
    PlayVideo,
    ResumeElapsed,
    ScheduleResume,
    SetMuted,
    StartAutoplay,
    StopVideo,
    Tick,
    TimerElapsed,
    Unmount,
    initial_state,
    transition,
)

logger = logging.getLogger(__name__)

VIDEO_EFFECTS = (PlayVideo, PauseVideo, StopVideo, SetMuted)


class CarouselDriver:
    def __init__(
        self,
        scheduler,
        cfg: CarouselConfig,
        media=(),
        on_video: Callable | None = None,
    ):
        self.scheduler = scheduler
        self.cfg = cfg
        self.state: CarouselState = initial_state(media)
        self.on_video = on_video
        self._timer = None
        self._interval = None
        self._resume = None

    def pending(self) -> dict[str, bool]:
        return {
            "timer": self._timer is not None,
            "interval": self._interval is not None,
            "resume": self._resume is not None,
        }

    def mount(self) -> None:
        self.dispatch(Mount())

    def unmount(self) -> None:
        self.dispatch(Unmount())

    def dispatch(self, event) -> CarouselState:
        self.state, effects = transition(self.state, event, self.cfg)
        for effect in effects:
            self._apply(effect)
        return self.state

    def _call_later(self, delay_ms: int, callback):
        return self.scheduler.call_later(delay_ms / 1000, callback)

    def _cancel_autoplay(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._interval is not None:
            self._interval.cancel()
            self._interval = None

    def _cancel_resume(self) -> None:
        if self._resume is not None:
            self._resume.cancel()
            self._resume = None

    def _apply(self, effect) -> None:
        if isinstance(effect, CancelAutoplay):
            self._cancel_autoplay()
        elif isinstance(effect, StartAutoplay):
            self._cancel_autoplay()
            self._timer = self._call_later(effect.remaining_ms, self._on_timer)
            self._interval = self._call_later(effect.tick_ms, self._on_tick)
        elif isinstance(effect, ScheduleResume):
            self._cancel_resume()
            self._resume = self._call_later(effect.delay_ms, self._on_resume)
        elif isinstance(effect, CancelResume):
            self._cancel_resume()
        elif isinstance(effect, VIDEO_EFFECTS):
            if self.on_video is not None:
                self.on_video(effect)
        else:
            raise ValueError(f"Unknown carousel effect: {effect!r}")

    def _on_timer(self) -> None:
        self._timer = None
        self.dispatch(TimerElapsed())

    def _on_tick(self) -> None:
        self._interval = None
        self.dispatch(Tick())
        if (
            self._interval is None
            and self.state.mode == Mode.MULTI_PLAYING
            and self.state.autoplay_active
        ):
            self._interval = self._call_later(self.cfg.tick_ms, self._on_tick)

    def _on_resume(self) -> None:
        self._resume = None
        self.dispatch(ResumeElapsed())
