"""Patient age from birthdate."""
from datetime import date
from typing import Optional

from .errors import InvalidDateError


def calculate_age(birthdate: date, as_of: Optional[date] = None) -> int:
    """Whole years completed between birthdate and as_of.

    The current year counts only once the birthday has been reached. A
    29 February birthday is reached on 1 March in non-leap years.

    Args:
        birthdate: Patient date of birth
        as_of: Reference date, defaults to today

    Returns:
        Age in completed years

    Raises:
        InvalidDateError: If birthdate is after as_of
    """
    if as_of is None:
        as_of = date.today()
    if birthdate > as_of:
        raise InvalidDateError(
            f"Birthdate {birthdate.isoformat()} is after reference date {as_of.isoformat()}"
        )

    years = as_of.year - birthdate.year
    if (as_of.month, as_of.day) < (birthdate.month, birthdate.day):
        years -= 1
    return years
