"""Field mapping table: legacy task attribute -> effect on the new Task.

Every attribute the legacy writer is known to emit has an entry, including
the ones that are deliberately dropped, so an attribute missing from
`FIELD_HANDLERS` is genuinely unknown. Handlers receive the element's full
attribute map through `FieldContext.attributes` for the fields that depend on
a sibling (due dates, repeat settings).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from dateutil import tz

from taskrestore.backup.date_codec import format_display_date, parse_backup_date
from taskrestore.models.constants import FLAG_SYNC_ON_COMPLETE, GOAL_DEADLINE_NOTE
from taskrestore.models.task import Importance, Task
from taskrestore.recurrence.legacy_repeat import legacy_repeat_to_rrule

logger = logging.getLogger(__name__)

DEFINITE_DUE_DATE = "definite_due_date"
PREFERRED_DUE_DATE = "preferred_due_date"
REPEAT_INTERVAL = "repeat_interval"
REPEAT_VALUE = "repeat_value"

# Legacy importance levels in declaration order; the ordinal carries over.
_LEGACY_IMPORTANCE: Dict[str, Importance] = {
    "LEVEL_1": Importance.DO_OR_DIE,
    "LEVEL_2": Importance.MUST_DO,
    "LEVEL_3": Importance.SHOULD_DO,
    "LEVEL_4": Importance.NONE,
}


@dataclass
class FieldContext:
    """Per-element state shared by the handlers of one <task> element."""

    task: Task
    attributes: Mapping[str, str]
    default_tz: tzinfo
    upgrade_note: Optional[str] = None
    sync_on_complete: bool = False


FieldHandler = Callable[[FieldContext, str], None]


def _require_date(value: str, ctx: FieldContext) -> datetime:
    parsed = parse_backup_date(value, ctx.default_tz)
    if parsed is None:
        raise ValueError(f"unparseable date {value!r}")
    return parsed


def _ignore(ctx: FieldContext, value: str) -> None:
    pass


def _set_text(field: str) -> FieldHandler:
    def handler(ctx: FieldContext, value: str) -> None:
        setattr(ctx.task, field, value)
    return handler


def _set_int(field: str) -> FieldHandler:
    def handler(ctx: FieldContext, value: str) -> None:
        setattr(ctx.task, field, int(value))
    return handler


def _set_date(field: str) -> FieldHandler:
    def handler(ctx: FieldContext, value: str) -> None:
        setattr(ctx.task, field, _require_date(value, ctx))
    return handler


def _set_importance(ctx: FieldContext, value: str) -> None:
    token = value.strip().upper()
    if token not in _LEGACY_IMPORTANCE:
        raise ValueError(f"unknown importance {value!r}")
    ctx.task.importance = _LEGACY_IMPORTANCE[token]


def _set_definite_due_date(ctx: FieldContext, value: str) -> None:
    ctx.task.due_date = _require_date(value, ctx)
    preferred = ctx.attributes.get(PREFERRED_DUE_DATE)
    if preferred is None:
        return
    preferred_date = parse_backup_date(preferred, ctx.default_tz)
    if preferred_date is None:
        logger.warning(f"Task {ctx.task.title!r}: goal deadline {preferred!r} is not a date, dropped")
        return
    local = preferred_date.replace(tzinfo=tz.UTC).astimezone(ctx.default_tz)
    ctx.upgrade_note = GOAL_DEADLINE_NOTE.format(date=format_display_date(local))


def _set_preferred_due_date(ctx: FieldContext, value: str) -> None:
    if DEFINITE_DUE_DATE in ctx.attributes:
        return
    ctx.task.due_date = _require_date(value, ctx)


def _set_reminder_period(ctx: FieldContext, value: str) -> None:
    ctx.task.reminder_period = timedelta(milliseconds=int(value) * 1000)


def _set_recurrence(ctx: FieldContext, value: str) -> None:
    repeat_value = int(value)
    interval = ctx.attributes.get(REPEAT_INTERVAL)
    if repeat_value > 0 and interval is not None:
        ctx.task.recurrence_rule = legacy_repeat_to_rrule(interval, repeat_value)


def _set_flags(ctx: FieldContext, value: str) -> None:
    if int(value) == FLAG_SYNC_ON_COMPLETE:
        ctx.sync_on_complete = True


FIELD_HANDLERS: Dict[str, FieldHandler] = {
    "id": _ignore,
    "name": _set_text("title"),
    "notes": _set_text("notes"),
    "progress_percentage": _ignore,
    "importance": _set_importance,
    "estimated_seconds": _set_int("estimated_seconds"),
    "elapsed_seconds": _set_int("elapsed_seconds"),
    "postpone_count": _set_int("postpone_count"),
    "timer_start": _set_date("timer_start"),
    "hidden_until": _set_date("hide_until"),
    "creation_date": _set_date("created_at"),
    "completion_date": _set_date("completed_at"),
    "last_notified": _set_date("last_notified"),
    DEFINITE_DUE_DATE: _set_definite_due_date,
    PREFERRED_DUE_DATE: _set_preferred_due_date,
    "blocking_on": _ignore,
    "notifications": _set_reminder_period,
    "notification_flags": _set_int("reminder_flags"),
    REPEAT_INTERVAL: _ignore,  # read by repeat_value
    REPEAT_VALUE: _set_recurrence,
    "flags": _set_flags,
}


def apply_task_fields(
    task: Task,
    items: Iterable[Tuple[str, str]],
    attributes: Mapping[str, str],
    default_tz: tzinfo,
) -> FieldContext:
    """Run every attribute of a <task> element through `FIELD_HANDLERS`.

    Unknown attributes are logged and ignored. A known attribute whose value
    cannot be converted is logged and leaves its field unset; neither aborts
    the import.
    """
    ctx = FieldContext(task=task, attributes=attributes, default_tz=default_tz)
    for name, value in items:
        handler = FIELD_HANDLERS.get(name)
        if handler is None:
            logger.info(f"Task: {task.title}: Unknown field '{name}' with value '{value}' disregarded.")
            continue
        try:
            handler(ctx, value)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Task: {task.title}: field '{name}' with value '{value}' not imported: {e}")
    return ctx
