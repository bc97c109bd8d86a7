"""
Request Parameter Parsing

Turns raw filter parameters (query-string values from the web layer) into
a FilterCriteria.

RULES:
- Missing, blank and "all" mean the dimension is not filtered
- Month and year must be whole numbers; month must be 1-12
- Nothing is clamped or guessed: a bad value is reported, every problem
  at once, as InvalidCriteria
"""

from typing import Optional, Union

from fundledger.models.ledger import FilterCriteria, InvalidCriteria

UNSET_MARKERS = {"", "all"}

RawValue = Optional[Union[str, int]]


def _is_unset(value: RawValue) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in UNSET_MARKERS)


def _parse_int(name: str, value: RawValue, problems: list[str]) -> Optional[int]:
    if _is_unset(value):
        return None
    if isinstance(value, bool):
        problems.append(f"{name}: expected a whole number, got {value!r}")
        return None
    if isinstance(value, int):
        return value
    text = value.strip()
    try:
        return int(text, 10)
    except ValueError:
        problems.append(f"{name}: expected a whole number, got {value!r}")
        return None


def _parse_label(value: Optional[str]) -> Optional[str]:
    if _is_unset(value):
        return None
    return value.strip()


def parse_criteria(
    month: RawValue = None,
    year: RawValue = None,
    category: Optional[str] = None,
    bank: Optional[str] = None,
) -> FilterCriteria:
    """
    Build FilterCriteria from raw request values.

    Raises:
        InvalidCriteria: If any value cannot be used as given
    """
    problems: list[str] = []
    month_value = _parse_int("month", month, problems)
    year_value = _parse_int("year", year, problems)
    if problems:
        raise InvalidCriteria("Invalid filter parameters: " + "; ".join(problems), problems)

    # Range checks happen in the model
    return FilterCriteria(
        month=month_value,
        year=year_value,
        category=_parse_label(category),
        bank=_parse_label(bank),
    )
