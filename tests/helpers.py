"""Shared test helpers for the interval timer."""

from intervaltimer.timer import engine
from intervaltimer.timer.engine import Cue, Session


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def tick(session: Session, times: int = 1, step: float = 1.0) -> tuple[Session, list[Cue]]:
    """Advance *session* by *times* increments of *step* seconds."""
    cues: list[Cue] = []
    for _ in range(times):
        session, new = engine.advance(session, step)
        cues.extend(new)
    return session, cues
