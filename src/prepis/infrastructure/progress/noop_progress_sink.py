"""No-op progress sink for quiet runs."""

from prepis.domain.ports import ProgressSink
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot


class NoopProgressSink(ProgressSink):
    """Sink that discards every progress update."""

    def render(self, snapshot: ProgressSnapshot) -> None:
        _ = snapshot

    def finish(self, snapshot: ProgressSnapshot, outcome: ProgressOutcome) -> None:
        _ = (snapshot, outcome)


__all__ = ["NoopProgressSink"]
