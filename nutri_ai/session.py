"""
Session state machine.

transition() is pure: (state, event) -> (new state, effects). Effects are
carried out by the controller (camera release/start, analysis, notification).

    locked --KEY x4 (match)--> initial
    initial --START_CAMERA--> camera --CAPTURE--> loading
    initial --UPLOAD--> loading
    loading --ANALYSIS_SUCCEEDED--> results
    loading --ANALYSIS_FAILED--> initial
    camera --CAMERA_FAILED--> initial
    camera/results/initial --BACK--> initial
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Optional, Tuple

from nutri_ai.acquire import CapturedImage
from nutri_ai.config import PIN_LENGTH
from nutri_ai.errors import InvalidTransition
from nutri_ai.renderer import ResultView

BACKSPACE = "backspace"


class UIState(str, Enum):
    LOCKED = "locked"
    INITIAL = "initial"
    CAMERA = "camera"
    LOADING = "loading"
    RESULTS = "results"


class Event(str, Enum):
    KEY = "key"
    START_CAMERA = "start_camera"
    CAMERA_FAILED = "camera_failed"
    CAPTURE = "capture"
    UPLOAD = "upload"
    ANALYSIS_SUCCEEDED = "analysis_succeeded"
    ANALYSIS_FAILED = "analysis_failed"
    BACK = "back"


class Effect(str, Enum):
    START_STREAM = "start_stream"
    RELEASE_STREAM = "release_stream"
    ANALYZE = "analyze"
    RENDER_RESULTS = "render_results"
    NOTIFY_ERROR = "notify_error"
    REJECT_PIN = "reject_pin"


@dataclass(frozen=True)
class SessionState:
    screen: UIState = UIState.LOCKED
    entered_pin: str = ""
    image: Optional[CapturedImage] = None
    result: Optional[ResultView] = None
    error: Optional[str] = None
    attempt: int = 0


Transition = Tuple[SessionState, List[Effect]]


def _reset(state: SessionState, error: Optional[str] = None) -> SessionState:
    return replace(state, screen=UIState.INITIAL, image=None, result=None, error=error)


def _press_key(state: SessionState, key: str, correct_pin: str) -> Transition:
    if key == BACKSPACE:
        return replace(state, entered_pin=state.entered_pin[:-1]), []
    if not (len(key) == 1 and key.isdigit()) or len(state.entered_pin) >= PIN_LENGTH:
        return state, []

    entered = state.entered_pin + key
    if len(entered) < PIN_LENGTH:
        return replace(state, entered_pin=entered), []
    if entered == correct_pin:
        return replace(state, screen=UIState.INITIAL, entered_pin=""), []
    return replace(state, entered_pin=""), [Effect.REJECT_PIN]


def _finish(state: SessionState, value: Any, succeeded: bool) -> Transition:
    attempt, payload = value
    if state.screen is not UIState.LOADING or attempt != state.attempt:
        # Stale completion for a screen that is no longer active
        return state, []
    if succeeded:
        return (
            replace(state, screen=UIState.RESULTS, image=None, result=payload, error=None),
            [Effect.RENDER_RESULTS],
        )
    return _reset(state, error=payload), [Effect.RELEASE_STREAM, Effect.NOTIFY_ERROR]


def transition(
    state: SessionState,
    event: Event,
    value: Any = None,
    correct_pin: str = "",
) -> Transition:
    screen = state.screen

    if event is Event.KEY and screen is UIState.LOCKED:
        return _press_key(state, str(value or ""), correct_pin)

    if event is Event.START_CAMERA and screen is UIState.INITIAL:
        return replace(state, screen=UIState.CAMERA, error=None), [Effect.START_STREAM]

    if event is Event.CAMERA_FAILED and screen is UIState.CAMERA:
        return _reset(state, error=value), [Effect.RELEASE_STREAM, Effect.NOTIFY_ERROR]

    if event is Event.CAPTURE and screen is UIState.CAMERA:
        return (
            replace(state, screen=UIState.LOADING, image=value, attempt=state.attempt + 1),
            [Effect.RELEASE_STREAM, Effect.ANALYZE],
        )

    if event is Event.UPLOAD and screen is UIState.INITIAL:
        return (
            replace(state, screen=UIState.LOADING, image=value, error=None, attempt=state.attempt + 1),
            [Effect.ANALYZE],
        )

    if event is Event.ANALYSIS_SUCCEEDED:
        return _finish(state, value, succeeded=True)

    if event is Event.ANALYSIS_FAILED:
        return _finish(state, value, succeeded=False)

    if event is Event.BACK and screen in (UIState.INITIAL, UIState.CAMERA, UIState.RESULTS):
        return _reset(state), [Effect.RELEASE_STREAM]

    raise InvalidTransition(f"Cannot handle '{event.value}' on the '{screen.value}' screen")
