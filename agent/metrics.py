import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class StepMetric:
    state: str
    start_time: float
    end_time: Optional[float] = None

    @property
    def duration(self) -> float:
        return (self.end_time or time.monotonic()) - self.start_time


@dataclass
class MetricsTracker:
    start_time: float = field(default_factory=time.monotonic)
    steps: list[StepMetric] = field(default_factory=list)

    def start_step(self, state: str) -> None:
        self.steps.append(StepMetric(state=state, start_time=time.monotonic()))

    def end_step(self) -> None:
        if self.steps and self.steps[-1].end_time is None:
            self.steps[-1].end_time = time.monotonic()

    def get_summary(self, outcome: Optional[str] = None, reason: Optional[str] = None) -> dict:
        return {
            "outcome": outcome,
            "reason": reason,
            "total_time_seconds": round(time.monotonic() - self.start_time, 2),
            "steps": [
                {"state": s.state, "time_seconds": round(s.duration, 2)}
                for s in self.steps
            ],
        }

    def print_summary(self, outcome: Optional[str] = None, reason: Optional[str] = None) -> None:
        s = self.get_summary(outcome, reason)
        print(f"\n{'='*50}")
        print(f"RECAPTCHA AUDIO SOLVER - RESULTS")
        print(f"{'='*50}")
        print(f"Outcome: {s['outcome']}" + (f" ({s['reason']})" if s['reason'] else ""))
        print(f"Total time: {s['total_time_seconds']:.1f}s")
        for step in s["steps"]:
            print(f"  {step['state']:<20} {step['time_seconds']:.2f}s")
        print(f"{'='*50}\n")
