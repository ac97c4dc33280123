"""Timer facility used by the scheduler and the debouncer.

Public API:
- Timer: protocol (after, cancel, now)
- LoopTimer: asyncio implementation
"""

from infrastructure.scheduling.timers import LoopTimer, Timer

__all__ = ["LoopTimer", "Timer"]
