from __future__ import annotations

from stackcomp.core.errors import InvalidCronFormat
from stackcomp.core.result import Err, Ok, Result

__all__ = ["translate"]

_WILDCARD = "*"
_NO_VALUE = "?"


def translate(cron_expression: str) -> Result[str, InvalidCronFormat]:
    """Translate a 5-field cron expression into the provider's cron() form.

    The provider rejects day-of-month and day-of-week both being "*", so that
    exact pair becomes "* ... ?". Other combinations pass through untouched.

        translate("0 12 * * *") -> Ok("cron(0 12 * * ? *)")
        translate("0 0 1 * *")  -> Ok("cron(0 0 1 * * *)")
    """
    fields = cron_expression.strip().split(" ")
    if len(fields) != 5 or any(not f for f in fields):
        return Err(InvalidCronFormat(expression=cron_expression))

    minute, hour, day_of_month, month, day_of_week = fields
    if day_of_month == _WILDCARD and day_of_week == _WILDCARD:
        day_of_week = _NO_VALUE

    return Ok(f"cron({minute} {hour} {day_of_month} {month} {day_of_week} {_WILDCARD})")
