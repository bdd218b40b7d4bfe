"""State machine records for a single reCAPTCHA solving session."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from metrics import MetricsTracker


class State(str, Enum):
    IDLE = "idle"
    DETECTED = "detected"
    CLICKED = "clicked"
    AWAITING_CHALLENGE = "awaiting_challenge"
    AUDIO_REQUESTED = "audio_requested"
    AUDIO_RECEIVED = "audio_received"
    TRANSCRIBED = "transcribed"
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    BLOCKED = "blocked"
    NO_AUDIO_OPTION = "no_audio_option"
    NOT_PRESENT = "not_present"
    FAILED = "failed"


class Outcome(str, Enum):
    SOLVED = "solved"
    VERIFIED = "solved"
    NOT_PRESENT = "not_present"
    BLOCKED = "blocked"
    NO_AUDIO_OPTION = "no_audio_option"
    FAILED = "failed"


TERMINAL_OUTCOMES = {
    State.VERIFIED: Outcome.SOLVED,
    State.NOT_PRESENT: Outcome.NOT_PRESENT,
    State.BLOCKED: Outcome.BLOCKED,
    State.NO_AUDIO_OPTION: Outcome.NO_AUDIO_OPTION,
    State.FAILED: Outcome.FAILED,
}


class SolverTimeouts(BaseModel):
    """Bounded waits, in milliseconds, for each step that polls the page."""

    probe_ms: int = 2000  # checkbox anchor visibility
    click_settle_ms: int = 1000  # pause after ticking the checkbox
    challenge_ms: int = 5000  # challenge frame appearance
    audio_error_ms: int = 2000  # error banner after requesting audio
    submit_settle_ms: int = 1500  # pause after clicking verify


class VerificationOutcome(BaseModel):
    solved: bool
    outcome: Outcome
    reason: Optional[str] = None
    states: list[State] = []

    def __bool__(self) -> bool:
        return self.solved


@dataclass
class AudioArtifact:
    source: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class ChallengeSession:
    """One attempt at one widget. Only the solver mutates it."""

    timeouts: SolverTimeouts = field(default_factory=SolverTimeouts)
    state: State = State.IDLE
    outcome: Optional[Outcome] = None
    reason: Optional[str] = None
    history: list[State] = field(default_factory=list)
    metrics: MetricsTracker = field(default_factory=MetricsTracker)

    def __post_init__(self):
        self.history.append(self.state)
        self.metrics.start_step(self.state.value)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_OUTCOMES

    def advance(self, state: State) -> None:
        if self.finished:
            raise RuntimeError(f"session already ended in state {self.state.value}")
        self.metrics.end_step()
        self.state = state
        self.history.append(state)
        if state in TERMINAL_OUTCOMES:
            self.outcome = TERMINAL_OUTCOMES[state]
        else:
            self.metrics.start_step(state.value)

    def finish(self, state: State, reason: Optional[str] = None) -> None:
        if state not in TERMINAL_OUTCOMES:
            raise ValueError(f"{state.value} is not a terminal state")
        self.reason = reason
        self.advance(state)

    def result(self) -> VerificationOutcome:
        if not self.finished:
            raise RuntimeError(f"session still in state {self.state.value}")
        return VerificationOutcome(
            solved=self.outcome is Outcome.SOLVED,
            outcome=self.outcome,
            reason=self.reason,
            states=list(self.history),
        )
