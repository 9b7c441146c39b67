"""
Media carousel state machine.

The carousel shown on listing cards, on the profile page and in the story
viewer is modelled as a pure function ``transition(state, event, config)``
returning the next state plus a list of effects. Effects are commands for
whoever owns the clocks and the video elements (see ``driver.py``); the
machine itself never schedules anything.

Modes:

- ``idle-single``: zero or one media item, nothing to rotate.
- ``multi-playing``: an autoplay timer and a progress interval are running.
- ``multi-paused``: the user is hovering or touching; progress is frozen.
- ``multi-stopped``: a non-wrapping carousel sits on its last item.
- ``video-active``: the current item is a video; its own clock drives it and
  the synthetic progress stays at 0.

Carousels configured with ``tracks_view`` (listing cards) stay still until
the caller reports ``EnterView``; ``LeaveView`` suspends autoplay and pauses
the current video without rewinding it.

Manual navigation always emits ``CancelAutoplay`` before the index changes,
so a timer can never fire against an index the user has already moved away
from.
"""
import enum
from dataclasses import dataclass, replace

from marketplace.config import config
from marketplace.media import MediaItem


class Mode(str, enum.Enum):
    IDLE_SINGLE = "idle-single"
    MULTI_PAUSED = "multi-paused"
    MULTI_PLAYING = "multi-playing"
    MULTI_STOPPED = "multi-stopped"
    VIDEO_ACTIVE = "video-active"


@dataclass(frozen=True)
class CarouselConfig:
    duration_ms: int
    wraps: bool
    tick_ms: int = config.PROGRESS_TICK_MS
    advance_on_video_end: bool = False
    swipe_threshold: int = config.SWIPE_THRESHOLD_PX
    touch_resume_delay_ms: int = config.TOUCH_RESUME_DELAY_MS
    tracks_view: bool = False


PROFILE_CAROUSEL = CarouselConfig(duration_ms=config.PROFILE_AUTOPLAY_MS, wraps=True)
CARD_CAROUSEL = CarouselConfig(
    duration_ms=config.CARD_AUTOPLAY_MS, wraps=False, tracks_view=True
)
STORY_VIEWER = CarouselConfig(
    duration_ms=config.PROFILE_AUTOPLAY_MS, wraps=True, advance_on_video_end=True
)


@dataclass(frozen=True)
class CarouselState:
    media: tuple[MediaItem, ...] = ()
    index: int = 0
    direction: int = 0
    progress: float = 0.0
    elapsed_ms: int = 0
    paused: bool = False
    muted: bool = True
    mode: Mode = Mode.IDLE_SINGLE
    mounted: bool = False
    autoplay_active: bool = False
    resume_pending: bool = False
    # None until the first visibility report
    in_view: bool | None = None

    def current(self) -> MediaItem | None:
        """The item on screen, or ``None`` when the caller must draw a placeholder."""
        if not self.media:
            return None
        return self.media[self.index]


# Events


@dataclass(frozen=True)
class Mount:
    pass


@dataclass(frozen=True)
class Unmount:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class TimerElapsed:
    pass


@dataclass(frozen=True)
class ResumeElapsed:
    pass


@dataclass(frozen=True)
class PointerEnter:
    pass


@dataclass(frozen=True)
class PointerLeave:
    pass


@dataclass(frozen=True)
class TouchStart:
    pass


@dataclass(frozen=True)
class TouchEnd:
    pass


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Previous:
    pass


@dataclass(frozen=True)
class Select:
    index: int


@dataclass(frozen=True)
class Drag:
    offset_x: float


@dataclass(frozen=True)
class VideoEnded:
    pass


@dataclass(frozen=True)
class ToggleMute:
    pass


@dataclass(frozen=True)
class SetMedia:
    media: tuple[MediaItem, ...]


@dataclass(frozen=True)
class EnterView:
    pass


@dataclass(frozen=True)
class LeaveView:
    pass


# Effects


@dataclass(frozen=True)
class CancelAutoplay:
    pass


@dataclass(frozen=True)
class StartAutoplay:
    remaining_ms: int
    tick_ms: int


@dataclass(frozen=True)
class ScheduleResume:
    delay_ms: int


@dataclass(frozen=True)
class CancelResume:
    pass


@dataclass(frozen=True)
class PlayVideo:
    index: int
    muted: bool


@dataclass(frozen=True)
class StopVideo:
    index: int


@dataclass(frozen=True)
class PauseVideo:
    index: int


@dataclass(frozen=True)
class SetMuted:
    index: int
    muted: bool


def initial_state(media) -> CarouselState:
    return CarouselState(media=tuple(media))


def _is_video_at(state: CarouselState, index: int) -> bool:
    return 0 <= index < len(state.media) and state.media[index].is_video


def is_visible(state: CarouselState, cfg: CarouselConfig) -> bool:
    if state.in_view is None:
        return not cfg.tracks_view
    return state.in_view


def _settle(state: CarouselState, cfg: CarouselConfig, effects: list, entered: bool):
    """Derive the mode for the current item and start autoplay when it applies."""
    count = len(state.media)
    current = state.current()
    visible = is_visible(state, cfg)

    if current is not None and current.is_video:
        if entered and visible:
            effects.append(PlayVideo(state.index, state.muted))
        mode = Mode.VIDEO_ACTIVE if count > 1 else Mode.IDLE_SINGLE
        return replace(state, mode=mode, progress=0.0, elapsed_ms=0)

    if count <= 1:
        return replace(state, mode=Mode.IDLE_SINGLE, progress=0.0, elapsed_ms=0)

    if state.paused or not visible:
        return replace(state, mode=Mode.MULTI_PAUSED)

    if not cfg.wraps and state.index == count - 1:
        return replace(state, mode=Mode.MULTI_STOPPED)

    if state.autoplay_active:
        return replace(state, mode=Mode.MULTI_PLAYING)

    effects.append(StartAutoplay(cfg.duration_ms - state.elapsed_ms, cfg.tick_ms))
    return replace(state, mode=Mode.MULTI_PLAYING, autoplay_active=True)


def _move_to(state: CarouselState, index: int, direction: int, effects: list):
    if _is_video_at(state, state.index):
        effects.append(StopVideo(state.index))
    return replace(state, index=index, direction=direction, progress=0.0, elapsed_ms=0)


def _cancel_autoplay(state: CarouselState, effects: list) -> CarouselState:
    effects.append(CancelAutoplay())
    return replace(state, autoplay_active=False)


def _auto_advance(state: CarouselState, cfg: CarouselConfig, effects: list):
    state = _cancel_autoplay(state, effects)
    count = len(state.media)
    if state.index + 1 < count:
        target = state.index + 1
    elif cfg.wraps:
        target = 0
    else:
        return _settle(replace(state, progress=0.0, elapsed_ms=0), cfg, effects, False)
    return _settle(_move_to(state, target, 1, effects), cfg, effects, True)


def _navigation_target(state: CarouselState, event, cfg: CarouselConfig):
    count = len(state.media)
    index = state.index

    if isinstance(event, Drag):
        if event.offset_x > cfg.swipe_threshold:
            event = Previous()
        elif event.offset_x < -cfg.swipe_threshold:
            event = Next()
        else:
            return None

    if isinstance(event, Next):
        if index < count - 1:
            return index + 1, 1
        return (0, 1) if cfg.wraps else None

    if isinstance(event, Previous):
        if index > 0:
            return index - 1, -1
        return (count - 1, -1) if cfg.wraps else None

    if isinstance(event, Select):
        target = event.index % count if cfg.wraps else min(max(event.index, 0), count - 1)
        return target, 1 if target > index else -1

    return None


def _pause(state: CarouselState, effects: list) -> CarouselState:
    if state.resume_pending:
        effects.append(CancelResume())
    if state.autoplay_active:
        state = _cancel_autoplay(state, effects)
    mode = Mode.MULTI_PAUSED if state.mode == Mode.MULTI_PLAYING else state.mode
    return replace(state, paused=True, resume_pending=False, mode=mode)


def transition(state: CarouselState, event, cfg: CarouselConfig):
    """Apply ``event`` and return ``(new_state, effects)``."""
    effects: list = []

    if isinstance(event, Mount):
        if state.mounted:
            return state, effects
        index = min(max(state.index, 0), max(len(state.media) - 1, 0))
        state = replace(state, mounted=True, index=index, progress=0.0, elapsed_ms=0)
        return _settle(state, cfg, effects, True), effects

    if not state.mounted:
        return state, effects

    if isinstance(event, Unmount):
        effects.append(CancelAutoplay())
        effects.append(CancelResume())
        if _is_video_at(state, state.index):
            effects.append(StopVideo(state.index))
        return (
            replace(state, mounted=False, autoplay_active=False, resume_pending=False),
            effects,
        )

    if isinstance(event, Tick):
        if state.mode != Mode.MULTI_PLAYING or not state.autoplay_active:
            return state, effects
        elapsed = min(cfg.duration_ms, state.elapsed_ms + cfg.tick_ms)
        progress = elapsed * 100 / cfg.duration_ms
        return replace(state, elapsed_ms=elapsed, progress=progress), effects

    if isinstance(event, TimerElapsed):
        if state.mode != Mode.MULTI_PLAYING or not state.autoplay_active:
            return state, effects
        return _auto_advance(state, cfg, effects), effects

    if isinstance(event, VideoEnded):
        if state.mode != Mode.VIDEO_ACTIVE or not cfg.advance_on_video_end:
            return state, effects
        return _auto_advance(state, cfg, effects), effects

    if isinstance(event, (PointerEnter, TouchStart)):
        return _pause(state, effects), effects

    if isinstance(event, PointerLeave):
        if state.resume_pending:
            effects.append(CancelResume())
        state = replace(state, paused=False, resume_pending=False)
        return _settle(state, cfg, effects, False), effects

    if isinstance(event, TouchEnd):
        if state.resume_pending:
            effects.append(CancelResume())
        effects.append(ScheduleResume(cfg.touch_resume_delay_ms))
        return replace(state, resume_pending=True), effects

    if isinstance(event, ResumeElapsed):
        if not state.resume_pending:
            return state, effects
        state = replace(state, paused=False, resume_pending=False)
        return _settle(state, cfg, effects, False), effects

    if isinstance(event, (Next, Previous, Select, Drag)):
        if len(state.media) <= 1:
            return state, effects
        target = _navigation_target(state, event, cfg)
        if target is None or target[0] == state.index:
            return state, effects
        index, direction = target
        state = _cancel_autoplay(state, effects)
        state = _move_to(state, index, direction, effects)
        return _settle(state, cfg, effects, True), effects

    if isinstance(event, EnterView):
        if state.in_view:
            return state, effects
        state = replace(state, in_view=True)
        return _settle(state, cfg, effects, True), effects

    if isinstance(event, LeaveView):
        if state.in_view is False:
            return state, effects
        if state.autoplay_active:
            state = _cancel_autoplay(state, effects)
        if _is_video_at(state, state.index):
            effects.append(PauseVideo(state.index))
        state = replace(state, in_view=False)
        return _settle(state, cfg, effects, False), effects

    if isinstance(event, ToggleMute):
        state = replace(state, muted=not state.muted)
        if _is_video_at(state, state.index):
            effects.append(SetMuted(state.index, state.muted))
        return state, effects

    if isinstance(event, SetMedia):
        state = _cancel_autoplay(state, effects)
        if _is_video_at(state, state.index):
            effects.append(StopVideo(state.index))
        media = tuple(event.media)
        index = min(state.index, max(len(media) - 1, 0))
        state = replace(state, media=media, index=index, progress=0.0, elapsed_ms=0)
        return _settle(state, cfg, effects, True), effects

    raise ValueError(f"Unknown carousel event: {event!r}")
