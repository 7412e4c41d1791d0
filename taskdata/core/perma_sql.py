"""Perma-SQL Placeholders — symbolic time tokens resolved just before execution.

Invariants:
    - replace_placeholders is PURE given `now_millis`: same input, same output
    - Every token in PLACEHOLDERS is resolved; none reaches the store
    - Tokens are matched case-sensitively as literal substrings

Design Decisions:
    - Filters are stored with tokens instead of literal timestamps so a saved
      filter ("due today") stays correct on later days
    - Longer tokens resolved first: "EODTT()" must not be eaten by "EODT()"
"""

from taskdata.core import date_utils


VALUE_NOW = "NOW()"
VALUE_NOON = "NOON()"
VALUE_EOD = "EOD()"
VALUE_EOD_YESTERDAY = "EODY()"
VALUE_EOD_TOMORROW = "EODT()"
VALUE_EOD_DAY_AFTER = "EODTT()"
VALUE_EOD_NEXT_WEEK = "EODW()"
VALUE_EOD_NEXT_MONTH = "EODM()"


def _resolvers(now_millis: int) -> dict[str, int]:
    eod = date_utils.end_of_day(now_millis)
    return {
        VALUE_NOW: now_millis,
        VALUE_NOON: date_utils.noon(now_millis),
        VALUE_EOD: eod,
        VALUE_EOD_YESTERDAY: date_utils.end_of_day(now_millis, -1),
        VALUE_EOD_TOMORROW: date_utils.end_of_day(now_millis, 1),
        VALUE_EOD_DAY_AFTER: date_utils.end_of_day(now_millis, 2),
        VALUE_EOD_NEXT_WEEK: eod + date_utils.ONE_WEEK,
        VALUE_EOD_NEXT_MONTH: eod + date_utils.ONE_MONTH,
    }


PLACEHOLDERS: tuple[str, ...] = tuple(sorted(
    (
        VALUE_NOW, VALUE_NOON, VALUE_EOD, VALUE_EOD_YESTERDAY,
        VALUE_EOD_TOMORROW, VALUE_EOD_DAY_AFTER, VALUE_EOD_NEXT_WEEK,
        VALUE_EOD_NEXT_MONTH,
    ),
    key=len, reverse=True,
))


def replace_placeholders(value: str, now_millis: int | None = None) -> str:
    """Substitute every placeholder token in `value` with its literal timestamp."""
    if now_millis is None:
        now_millis = date_utils.now()
    values = _resolvers(now_millis)
    for token in PLACEHOLDERS:
        if token in value:
            value = value.replace(token, str(values[token]))
    return value
