# moodlog/usecases/reminder_usecase.py
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from moodlog.config import ReminderConfig
from moodlog.errors import PermissionDeniedError, PlatformScheduleError, ValidationError
from moodlog.helpers.schedule import next_fire_delay
from moodlog.models.reminder import NotificationContent, ReminderSlot
from moodlog.services.notification_host import NotificationHost

logger = logging.getLogger(__name__)

_UNSET = object()


def _check_field(name: str, value, upper: int):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= upper:
        raise ValidationError(f"{name} must be between 0 and {upper}, got {value!r}")


def validate_slot(slot: ReminderSlot) -> ReminderSlot:
    _check_field("hour", slot.hour, 23)
    _check_field("minute", slot.minute, 59)
    return slot


class ReminderUseCase:
    """Keeps the editable reminder slots and installs them as daily triggers"""

    def __init__(self, notification_host: NotificationHost, config: ReminderConfig,
                 clock: Optional[Callable[[], datetime]] = None):
        self.host = notification_host
        self.config = config
        self.clock = clock or datetime.now
        self._slots: List[ReminderSlot] = [ReminderSlot(hour, minute) for hour, minute in config.parsed_times()]
        self._installed: List[ReminderSlot] = []

    @property
    def slots(self) -> List[ReminderSlot]:
        return [ReminderSlot(slot.hour, slot.minute) for slot in self._slots]

    @property
    def installed(self) -> List[ReminderSlot]:
        return list(self._installed)

    def update_slot(self, index: int, hour: Any = _UNSET, minute: Any = _UNSET) -> ReminderSlot:
        """Edit one slot; takes effect on the next apply()"""
        if not 0 <= index < len(self._slots):
            raise ValidationError(f"No reminder slot {index + 1}, there are {len(self._slots)}")

        current = self._slots[index]
        updated = validate_slot(ReminderSlot(
            hour=current.hour if hour is _UNSET else hour,
            minute=current.minute if minute is _UNSET else minute
        ))
        self._slots[index] = updated
        return ReminderSlot(updated.hour, updated.minute)

    async def apply(self, slots: Optional[List[ReminderSlot]] = None) -> List[ReminderSlot]:
        """Replace the whole installed schedule with one daily trigger per complete slot.

        Every trigger on the host is cancelled first, including ones this use
        case did not install. Permission refusal leaves the old schedule alone.
        If the host rejects a trigger the remaining slots are not installed and
        PlatformScheduleError reports what is in place.
        """
        if slots is not None:
            slots = [validate_slot(ReminderSlot(slot.hour, slot.minute)) for slot in slots]
        else:
            slots = self.slots

        granted = await self.host.request_permission()
        if not granted:
            logger.warning("Notification permission denied, schedule left unchanged")
            raise PermissionDeniedError("notifications", "Notification permission denied: enable notifications for this app")

        await self.host.cancel_all()
        self._installed = []

        content = NotificationContent(title=self.config.notification_title, body=self.config.notification_body)
        for slot in slots:
            if not slot.is_complete:
                continue
            try:
                await self.host.schedule_daily(slot.hour, slot.minute, content)
            except Exception as e:
                logger.error(f"Error scheduling reminder at {slot.label()}: {e}")
                raise PlatformScheduleError(
                    f"Could not schedule the reminder at {slot.label()}: {e}",
                    installed=[(s.hour, s.minute) for s in self._installed]
                ) from e
            self._installed.append(slot)

        self._slots = [ReminderSlot(slot.hour, slot.minute) for slot in slots]

        if self.config.test_notification_delay:
            await self.host.schedule_once(
                self.config.test_notification_delay,
                NotificationContent(
                    title=self.config.test_notification_title,
                    body=self.config.test_notification_body
                )
            )

        for i, slot in enumerate(self._installed, 1):
            logger.info(f"Reminder {i}: every day at {slot.label()}")
        return self.installed

    async def schedule_one_shot(self, hour: int, minute: int) -> int:
        """Schedule a single notification at the next hour:minute; returns the delay in seconds"""
        validate_slot(ReminderSlot(hour, minute))
        if hour is None or minute is None:
            raise ValidationError("Both hour and minute are required")

        delay = next_fire_delay(hour, minute, self.clock())
        await self.host.schedule_once(
            delay,
            NotificationContent(title=self.config.notification_title, body=self.config.notification_body)
        )
        return delay

    async def status(self) -> Dict[str, Any]:
        return {
            "permission": await self.host.permission_status(),
            "scheduled_daily": len([t for t in self.host.scheduled() if t.kind == "daily"]),
            "slots": [slot.label() for slot in self._slots],
        }
