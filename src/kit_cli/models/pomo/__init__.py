"""Pomodoro timer: segment sequence, countdown engine and session loop."""

from .channels import CancelToken, Watch
from .controls import ControlAction, route_input
from .countdown import TICK_SECONDS, CountdownEngine, EngineState
from .segments import Segment, SegmentKind, SegmentSequence
from .session import PomodoroSession, SessionSnapshot, SessionState, TerminalPresenter
from .ui import PomoDisplay

__all__ = [
    "CancelToken",
    "ControlAction",
    "CountdownEngine",
    "EngineState",
    "PomoDisplay",
    "PomodoroSession",
    "Segment",
    "SegmentKind",
    "SegmentSequence",
    "SessionSnapshot",
    "SessionState",
    "TICK_SECONDS",
    "TerminalPresenter",
    "Watch",
    "route_input",
]
