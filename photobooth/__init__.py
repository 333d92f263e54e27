"""Photo booth page flow, camera capture with countdown, recording and saving."""

__version__ = "0.1.0"
__all__ = ["widgets", "selection", "dynamic", "capture", "final", "booth"]