"""Upload-notification relay from the queue to the fanout topic."""

from imagesync.relay.worker import RelayOutcome, RelayWorker, TickResult

__all__ = ["RelayOutcome", "RelayWorker", "TickResult"]
