# moodlog/services/notification_host.py
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from moodlog.config import ReminderConfig
from moodlog.helpers.schedule import next_occurrence
from moodlog.models.reminder import NotificationContent, ScheduledTrigger

logger = logging.getLogger(__name__)

class NotificationHost(ABC):
    """Platform side of reminders: permission and trigger installation"""

    @abstractmethod
    async def request_permission(self) -> bool:
        pass

    @abstractmethod
    async def permission_status(self) -> str:
        pass

    @abstractmethod
    async def cancel_all(self) -> None:
        pass

    @abstractmethod
    async def schedule_daily(self, hour: int, minute: int, content: NotificationContent) -> str:
        pass

    @abstractmethod
    async def schedule_once(self, delay_seconds: float, content: NotificationContent) -> str:
        pass

    @abstractmethod
    def scheduled(self) -> List[ScheduledTrigger]:
        pass


class AsyncioNotificationHost(NotificationHost):
    """Delivers notifications from asyncio tasks on the running event loop"""

    def __init__(self, config: ReminderConfig, clock: Optional[Callable[[], datetime]] = None):
        self.config = config
        self.clock = clock or datetime.now
        self._permission_requested = False
        self._triggers: Dict[str, ScheduledTrigger] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self.delivery_callbacks: List[Callable] = []

    def add_delivery_callback(self, callback: Callable):
        """Add callback called with (trigger, content) on every delivery"""
        self.delivery_callbacks.append(callback)

    async def request_permission(self) -> bool:
        self._permission_requested = True
        return self.config.notifications_allowed

    async def permission_status(self) -> str:
        if not self._permission_requested:
            return "undetermined"
        return "granted" if self.config.notifications_allowed else "denied"

    async def cancel_all(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        cancelled = len(self._triggers)
        self._tasks.clear()
        self._triggers.clear()
        logger.debug(f"Cancelled {cancelled} scheduled notifications")

    async def schedule_daily(self, hour: int, minute: int, content: NotificationContent) -> str:
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError(f"Invalid daily trigger time {hour}:{minute}")

        trigger = ScheduledTrigger(
            trigger_id=uuid4().hex,
            kind="daily",
            content=content,
            hour=hour,
            minute=minute
        )
        self._install(trigger, self._run_daily(trigger))
        logger.info(f"⏰ Daily reminder scheduled at {hour:02d}:{minute:02d}")
        return trigger.trigger_id

    async def schedule_once(self, delay_seconds: float, content: NotificationContent) -> str:
        if delay_seconds < 0:
            raise ValueError(f"Invalid delay {delay_seconds}")

        trigger = ScheduledTrigger(
            trigger_id=uuid4().hex,
            kind="once",
            content=content,
            delay_seconds=delay_seconds
        )
        self._install(trigger, self._run_once(trigger))
        logger.info(f"⏰ One-shot notification scheduled in {delay_seconds}s")
        return trigger.trigger_id

    def scheduled(self) -> List[ScheduledTrigger]:
        return list(self._triggers.values())

    async def close(self):
        await self.cancel_all()

    def _install(self, trigger: ScheduledTrigger, coro):
        self._triggers[trigger.trigger_id] = trigger
        self._tasks[trigger.trigger_id] = asyncio.create_task(coro, name=f"notification_{trigger.trigger_id}")

    async def _run_daily(self, trigger: ScheduledTrigger):
        target = next_occurrence(trigger.hour, trigger.minute, self.clock())
        while True:
            # Sleep can return early; only deliver once the target is reached
            remaining = (target - self.clock()).total_seconds()
            if remaining > 0:
                await asyncio.sleep(remaining)
                continue
            self._deliver(trigger)
            target = next_occurrence(trigger.hour, trigger.minute, target)

    async def _run_once(self, trigger: ScheduledTrigger):
        await asyncio.sleep(trigger.delay_seconds)
        self._deliver(trigger)
        self._triggers.pop(trigger.trigger_id, None)
        self._tasks.pop(trigger.trigger_id, None)

    def _deliver(self, trigger: ScheduledTrigger):
        logger.info(f"🔔 {trigger.content.title}: {trigger.content.body}")
        for callback in self.delivery_callbacks:
            try:
                callback(trigger, trigger.content)
            except Exception as e:
                logger.error(f"Error in notification callback: {e}")
