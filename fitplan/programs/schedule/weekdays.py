"""Allowed-weekday resolution and date walking.

Weekday indices follow the 0=Sunday..6=Saturday convention used by the
calendar clients. Python's ``date.weekday()`` is Monday=0, so every
conversion goes through ``weekday_index``.
"""

from collections.abc import Collection, Iterable
from datetime import date, timedelta

from loguru import logger

from fitplan.core.settings import settings
from fitplan.programs.types import SchedulingPreferences

ALL_WEEKDAYS: tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)

WEEKDAY_NAMES: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

_NAME_TO_INDEX: dict[str, int] = {
    **{name: index for index, name in enumerate(WEEKDAY_NAMES)},
    **{name[:3]: index for index, name in enumerate(WEEKDAY_NAMES)},
    "tues": 2,
    "weds": 3,
    "thur": 4,
    "thurs": 4,
}


def weekday_index(day: date) -> int:
    """Return the Sunday-based weekday index (0=Sunday..6=Saturday) of ``day``."""
    return (day.weekday() + 1) % 7


def weekday_from_name(name: str) -> int | None:
    """Match a weekday name or abbreviation case-insensitively.

    Returns:
        Weekday index, or None if the name is not recognized
    """
    return _NAME_TO_INDEX.get(name.strip().lower().rstrip("."))


def _indices_from_names(names: Iterable[str]) -> tuple[int, ...]:
    resolved = set()
    for name in names:
        index = weekday_from_name(name)
        if index is None:
            logger.debug(f"Ignoring unrecognized weekday name: {name!r}")
            continue
        resolved.add(index)
    return tuple(sorted(resolved))


def _indices_from_numbers(numbers: Iterable[int]) -> tuple[int, ...]:
    resolved = set()
    for number in numbers:
        if number not in ALL_WEEKDAYS:
            logger.debug(f"Ignoring out-of-range weekday index: {number}")
            continue
        resolved.add(number)
    return tuple(sorted(resolved))


def normalize_weekdays(
    preferences: SchedulingPreferences | dict | None,
) -> tuple[tuple[int, ...], SchedulingPreferences]:
    """Resolve preferences into an allowed weekday set and applied preferences.

    Resolution order:
    1. ``daysOfWeek`` if it resolves to at least one valid index
    2. ``preferred_days`` if it resolves to at least one known name
    3. every day of the week

    The applied preferences always carry the canonical numeric ``daysOfWeek``,
    a ``default_time`` and a ``default_duration_minutes`` so they can be
    persisted as the record of what scheduling actually used.

    Args:
        preferences: Caller preferences (model, raw dict, or None)

    Returns:
        Tuple of (sorted allowed weekday indices, applied preferences)
    """
    if preferences is None:
        prefs = SchedulingPreferences()
    elif isinstance(preferences, SchedulingPreferences):
        prefs = preferences
    else:
        prefs = SchedulingPreferences.model_validate(preferences)

    from_numbers = _indices_from_numbers(prefs.days_of_week or [])
    from_names = _indices_from_names(prefs.preferred_days or [])

    if from_numbers and from_names and from_numbers != from_names:
        logger.warning(
            "Both daysOfWeek and preferred_days supplied and they disagree; using daysOfWeek",
            days_of_week=list(from_numbers),
            preferred_days=prefs.preferred_days,
        )

    allowed = from_numbers or from_names or ALL_WEEKDAYS

    applied = SchedulingPreferences(
        days_of_week=list(allowed),
        default_time=prefs.default_time or settings.default_session_time,
        default_duration_minutes=prefs.default_duration_minutes or settings.default_session_duration_minutes,
        timezone=prefs.timezone,
    )
    return allowed, applied


def next_allowed_date(anchor: date, allowed: Collection[int], strictly_after: bool = False) -> date:
    """Return the first date on or after ``anchor`` whose weekday is allowed.

    Walks one calendar day at a time; month, year and leap-day rollover are
    left to ``date + timedelta``.

    Args:
        anchor: Date to start searching from
        allowed: Allowed Sunday-based weekday indices
        strictly_after: Exclude ``anchor`` itself even if its weekday is allowed

    Returns:
        The next allowed date

    Raises:
        ValueError: If ``allowed`` contains no valid weekday index, or the
            walk runs past ``date.max``
    """
    if not any(day in ALL_WEEKDAYS for day in allowed):
        raise ValueError(f"Allowed weekday set has no valid weekday: {sorted(allowed)}")

    try:
        candidate = anchor + timedelta(days=1) if strictly_after else anchor
        while weekday_index(candidate) not in allowed:
            candidate += timedelta(days=1)
    except OverflowError as e:
        raise ValueError(f"No allowed weekday between {anchor.isoformat()} and {date.max.isoformat()}") from e
    return candidate
