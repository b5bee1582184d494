from .queue import ItemIn, QueueSnapshot, QueueSize, RemovedItem, WaitOutcomePublic

__all__ = ["ItemIn", "QueueSnapshot", "QueueSize", "RemovedItem", "WaitOutcomePublic"]
