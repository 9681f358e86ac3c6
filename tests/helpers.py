"""Shared test helpers for CountDown."""

from countdown.timer.engine import CountdownEngine


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


class FakeNotifier:
    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def notify(self, title, body):
        self.sent.append((title, body))


class FakeSoundPlayer:
    def __init__(self):
        self.played: list[str] = []

    def play(self, name):
        self.played.append(name)


class BrokenCollaborator:
    """Raises from every call, like a notifier whose backend went away."""

    def notify(self, title, body):
        raise RuntimeError("notification backend unavailable")

    def play(self, name):
        raise RuntimeError("audio device unavailable")


def run_for(engine: CountdownEngine, seconds: float, step: float = 1.0) -> None:
    """Drive the engine the way the host loop does, in fixed steps."""
    ticks = round(seconds / step)
    for _ in range(ticks):
        engine.tick(step)
