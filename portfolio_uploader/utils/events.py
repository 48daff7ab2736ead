from dataclasses import dataclass
from typing import Dict, List, Callable
import asyncio
import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """Cumulative batch progress after one outcome."""
    done: int
    total: int
    completed: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 100
        return (self.done * 100) // self.total

    @property
    def finished(self) -> bool:
        return self.done >= self.total


class EventEmitter:
    """Simple event emitter for batch events."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}
        self._lock = asyncio.Lock()

    def on(self, event_name: str, callback: Callable):
        """Subscribe to an event."""
        listeners = self._listeners.setdefault(event_name, [])
        if callback not in listeners:
            listeners.append(callback)

    def off(self, event_name: str, callback: Callable):
        """Unsubscribe from an event."""
        if callback in self._listeners.get(event_name, []):
            self._listeners[event_name].remove(callback)

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, []))

    async def emit(self, event_name: str, *args, **kwargs):
        """Emit an event to all listeners, in subscription order."""
        if event_name not in self._listeners:
            return

        async with self._lock:
            for callback in self._listeners[event_name][:]:
                try:
                    if asyncio.iscoroutinefunction(callback):
                        await callback(*args, **kwargs)
                    else:
                        callback(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Error in event listener for {event_name}: {e}")
