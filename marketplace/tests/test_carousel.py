import pytest

from marketplace.carousel.machine import (
    CARD_CAROUSEL,
    PROFILE_CAROUSEL,
    STORY_VIEWER,
    CancelAutoplay,
    CancelResume,
    Drag,
    EnterView,
    LeaveView,
    Mode,
    Mount,
    Next,
    PauseVideo,
    PlayVideo,
    PointerEnter,
    PointerLeave,
    Previous,
    ResumeElapsed,
    ScheduleResume,
    Select,
    SetMedia,
    SetMuted,
    StartAutoplay,
    StopVideo,
    Tick,
    TimerElapsed,
    ToggleMute,
    TouchEnd,
    TouchStart,
    Unmount,
    VideoEnded,
    initial_state,
    transition,
)
from marketplace.media import to_media_items

IMAGES = to_media_items(
    [
        "https://cdn.example.com/1.jpg",
        "https://cdn.example.com/2.jpg",
        "https://cdn.example.com/3.jpg",
    ]
)
WITH_VIDEO = to_media_items(
    [
        "https://cdn.example.com/1.jpg",
        "https://cdn.example.com/2.mp4",
        "https://cdn.example.com/3.jpg",
    ]
)


def run(state, events, cfg=PROFILE_CAROUSEL):
    effects = []
    for event in events:
        state, emitted = transition(state, event, cfg)
        effects.extend(emitted)
    return state, effects


def mounted(media, cfg=PROFILE_CAROUSEL):
    state, _ = transition(initial_state(media), Mount(), cfg)
    if cfg.tracks_view:
        state, _ = transition(state, EnterView(), cfg)
    return state


def test_mount_with_several_images_starts_autoplay():
    state, effects = transition(initial_state(IMAGES), Mount(), PROFILE_CAROUSEL)

    assert state.mode == Mode.MULTI_PLAYING
    assert effects == [StartAutoplay(5000, 50)]


@pytest.mark.parametrize("media", [[], IMAGES[:1]])
def test_zero_or_one_item_is_idle(media):
    state, effects = transition(initial_state(media), Mount(), PROFILE_CAROUSEL)

    assert state.mode == Mode.IDLE_SINGLE
    assert effects == []


def test_empty_media_has_no_current_item():
    state = mounted([])

    assert state.current() is None
    assert state.index == 0


def test_ticks_accumulate_progress():
    state, _ = run(mounted(IMAGES), [Tick()] * 40)

    assert state.progress == 40
    assert state.elapsed_ms == 2000


def test_timer_advances_and_resets_progress():
    state, effects = run(mounted(IMAGES), [Tick()] * 100 + [TimerElapsed()])

    assert state.index == 1
    assert state.progress == 0
    assert state.direction == 1
    assert effects == [CancelAutoplay(), StartAutoplay(5000, 50)]


def test_profile_carousel_wraps_to_first():
    state, _ = run(mounted(IMAGES), [TimerElapsed(), TimerElapsed(), TimerElapsed()])

    assert state.index == 0
    assert state.mode == Mode.MULTI_PLAYING


def test_card_carousel_stops_at_last_item():
    state, effects = run(
        mounted(IMAGES, CARD_CAROUSEL), [TimerElapsed(), TimerElapsed()], CARD_CAROUSEL
    )

    assert state.index == 2
    assert state.mode == Mode.MULTI_STOPPED
    assert state.autoplay_active is False
    assert effects[-1] == CancelAutoplay()

    state, effects = transition(state, TimerElapsed(), CARD_CAROUSEL)
    assert state.index == 2
    assert effects == []


def test_pointer_enter_freezes_and_leave_resumes_remaining_time():
    state, effects = run(mounted(IMAGES), [Tick()] * 40 + [PointerEnter()])

    assert state.mode == Mode.MULTI_PAUSED
    assert state.progress == 40
    assert effects == [CancelAutoplay()]

    state, effects = run(state, [Tick(), Tick()])
    assert state.progress == 40

    state, effects = transition(state, PointerLeave(), PROFILE_CAROUSEL)
    assert state.mode == Mode.MULTI_PLAYING
    assert effects == [StartAutoplay(3000, 50)]


def test_touch_end_waits_for_grace_period():
    state, effects = run(mounted(IMAGES), [TouchStart(), TouchEnd()])

    assert state.mode == Mode.MULTI_PAUSED
    assert state.resume_pending is True
    assert effects[-1] == ScheduleResume(1000)

    state, effects = transition(state, ResumeElapsed(), PROFILE_CAROUSEL)
    assert state.mode == Mode.MULTI_PLAYING
    assert effects == [StartAutoplay(5000, 50)]


def test_touch_during_grace_cancels_pending_resume():
    state, effects = run(mounted(IMAGES), [TouchStart(), TouchEnd(), TouchStart()])

    assert state.resume_pending is False
    assert effects[-1] == CancelResume()

    state, effects = transition(state, ResumeElapsed(), PROFILE_CAROUSEL)
    assert state.mode == Mode.MULTI_PAUSED
    assert effects == []


def test_manual_navigation_cancels_before_moving():
    state, effects = run(mounted(IMAGES), [Tick()] * 10 + [Next()])

    assert effects[0] == CancelAutoplay()
    assert effects[1:] == [StartAutoplay(5000, 50)]
    assert state.index == 1
    assert state.progress == 0


def test_card_navigation_clamps():
    state = mounted(IMAGES, CARD_CAROUSEL)

    state, effects = transition(state, Previous(), CARD_CAROUSEL)
    assert state.index == 0
    assert effects == []

    state, _ = transition(state, Select(7), CARD_CAROUSEL)
    assert state.index == 2


def test_profile_navigation_wraps():
    state, _ = run(mounted(IMAGES), [Previous()])
    assert state.index == 2
    assert state.direction == -1

    state, _ = run(state, [Next()])
    assert state.index == 0


def test_drag_threshold():
    state = mounted(IMAGES, CARD_CAROUSEL)

    state, effects = transition(state, Drag(-30), CARD_CAROUSEL)
    assert state.index == 0
    assert effects == []

    state, _ = transition(state, Drag(-80), CARD_CAROUSEL)
    assert state.index == 1

    state, _ = transition(state, Drag(60), CARD_CAROUSEL)
    assert state.index == 0


def test_video_item_suspends_timer_and_plays_muted():
    state, effects = run(mounted(WITH_VIDEO), [Tick()] * 20 + [Next()])

    assert state.mode == Mode.VIDEO_ACTIVE
    assert state.progress == 0
    assert effects == [CancelAutoplay(), PlayVideo(1, True)]

    state, effects = run(state, [Tick(), TimerElapsed()])
    assert state.index == 1
    assert effects == []


def test_leaving_video_stops_and_rewinds():
    state, effects = run(mounted(WITH_VIDEO), [Next(), Next()])

    assert state.index == 2
    assert StopVideo(1) in effects
    assert effects[-1] == StartAutoplay(5000, 50)


def test_video_end_only_advances_in_story_viewer():
    profile_state, effects = run(mounted(WITH_VIDEO), [Select(1), VideoEnded()])
    assert profile_state.index == 1
    assert effects[-1] == PlayVideo(1, True)

    story = mounted(WITH_VIDEO, STORY_VIEWER)
    story, effects = run(story, [Select(1), VideoEnded()], STORY_VIEWER)
    assert story.index == 2
    assert StopVideo(1) in effects


def test_pause_does_not_affect_video_mode():
    state, _ = run(mounted(WITH_VIDEO), [Select(1), PointerEnter()])

    assert state.mode == Mode.VIDEO_ACTIVE
    assert state.paused is True

    state, effects = transition(state, PointerLeave(), PROFILE_CAROUSEL)
    assert state.mode == Mode.VIDEO_ACTIVE
    assert effects == []


def test_toggle_mute_on_video():
    state, effects = run(mounted(WITH_VIDEO), [Select(1), ToggleMute()])

    assert state.muted is False
    assert effects[-1] == SetMuted(1, False)


def test_unmount_cancels_everything_and_ignores_later_events():
    state, effects = run(mounted(WITH_VIDEO), [Select(1), TouchStart(), TouchEnd(), Unmount()])

    assert effects[-3:] == [CancelAutoplay(), CancelResume(), StopVideo(1)]
    assert state.mounted is False

    state, effects = run(state, [Next(), TimerElapsed(), ResumeElapsed()])
    assert effects == []
    assert state.index == 1


def test_media_shrinking_to_nothing_is_safe():
    state, _ = run(mounted(IMAGES), [Select(2), SetMedia(())])

    assert state.index == 0
    assert state.current() is None
    assert state.mode == Mode.IDLE_SINGLE


VIDEO_FIRST = to_media_items(
    ["https://cdn.example.com/intro.mp4", "https://cdn.example.com/1.jpg"]
)


def test_card_waits_for_viewport_before_autoplay():
    state, effects = transition(initial_state(IMAGES), Mount(), CARD_CAROUSEL)

    assert state.mode == Mode.MULTI_PAUSED
    assert effects == []

    state, effects = run(state, [Tick(), TimerElapsed()], CARD_CAROUSEL)
    assert state.index == 0
    assert state.progress == 0
    assert effects == []

    state, effects = transition(state, EnterView(), CARD_CAROUSEL)
    assert state.mode == Mode.MULTI_PLAYING
    assert effects == [StartAutoplay(4000, 50)]


def test_card_video_plays_only_in_view():
    state, effects = transition(initial_state(VIDEO_FIRST), Mount(), CARD_CAROUSEL)
    assert state.mode == Mode.VIDEO_ACTIVE
    assert effects == []

    state, effects = transition(state, EnterView(), CARD_CAROUSEL)
    assert effects == [PlayVideo(0, True)]

    state, effects = transition(state, LeaveView(), CARD_CAROUSEL)
    assert effects == [PauseVideo(0)]
    assert state.mode == Mode.VIDEO_ACTIVE
    assert state.in_view is False


def test_leaving_view_freezes_and_reentry_resumes_remaining_time():
    state, _ = run(mounted(IMAGES, CARD_CAROUSEL), [Tick()] * 40, CARD_CAROUSEL)
    assert state.progress == 50

    state, effects = transition(state, LeaveView(), CARD_CAROUSEL)
    assert effects == [CancelAutoplay()]
    assert state.mode == Mode.MULTI_PAUSED

    state, _ = run(state, [Tick(), Tick()], CARD_CAROUSEL)
    assert state.progress == 50

    state, effects = transition(state, EnterView(), CARD_CAROUSEL)
    assert state.mode == Mode.MULTI_PLAYING
    assert effects == [StartAutoplay(2000, 50)]


def test_repeated_visibility_reports_are_ignored():
    state = mounted(IMAGES, CARD_CAROUSEL)

    state, effects = transition(state, EnterView(), CARD_CAROUSEL)
    assert effects == []

    state, _ = transition(state, LeaveView(), CARD_CAROUSEL)
    state, effects = transition(state, LeaveView(), CARD_CAROUSEL)
    assert effects == []


def test_navigation_off_screen_does_not_play_video():
    state, _ = transition(initial_state(IMAGES[:1] + VIDEO_FIRST[:1]), Mount(), CARD_CAROUSEL)

    state, effects = transition(state, Next(), CARD_CAROUSEL)

    assert state.index == 1
    assert effects == [CancelAutoplay()]
