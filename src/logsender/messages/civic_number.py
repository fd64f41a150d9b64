"""Swedish civic registration numbers (personnummer / samordningsnummer).

A coordination number (samordningsnummer) is issued to people not
registered in Sweden. It has the same layout as a personnummer but with
60 added to the day of birth, so the first day digit is 6 or above.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from logsender.common.constants import CivicNumberConstants
from logsender.common.exceptions import InvalidCivicNumberError

_CIVIC_NUMBER_PATTERN = re.compile(
    r"^(?P<century>\d{2})?(?P<yymmdd>\d{6})(?P<separator>[-+]?)(?P<serial>\d{4})$"
)


def _luhn_valid(digits: str) -> bool:
    total = 0
    for index, char in enumerate(digits):
        product = int(char) * (2 if index % 2 == 0 else 1)
        total += product - 9 if product > 9 else product
    return total % 10 == 0


def _resolve_century(yy: int, separator: str, today: date) -> int:
    year = (today.year // 100) * 100 + yy
    if year > today.year:
        year -= 100
    if separator == "+":
        year -= 100
    return year // 100


@dataclass(frozen=True)
class CivicNumber:
    """A validated civic registration number in normalized yyyyMMddNNNN form."""

    normalized: str
    original: str

    @property
    def is_coordination_number(self) -> bool:
        """True if this is a samordningsnummer."""
        day_digit = int(self.normalized[CivicNumberConstants.SAMORDNING_DAY_INDEX])
        return day_digit >= CivicNumberConstants.SAMORDNING_DAY_MIN

    @property
    def root(self) -> str:
        """Code system identifier used when reporting the number downstream."""
        if self.is_coordination_number:
            return CivicNumberConstants.SAMORDNINGSNUMMER_ROOT
        return CivicNumberConstants.PERSONNUMMER_ROOT

    @property
    def birth_date(self) -> date:
        day = int(self.normalized[6:8])
        if self.is_coordination_number:
            day -= CivicNumberConstants.SAMORDNING_DAY_OFFSET
        return date(int(self.normalized[0:4]), int(self.normalized[4:6]), day)


def parse_civic_number(value: Optional[str], today: Optional[date] = None) -> Optional[CivicNumber]:
    """Parse and validate a civic number.

    Accepts yyyyMMdd-NNNN, yyyyMMddNNNN, yyMMdd-NNNN, yyMMdd+NNNN and yyMMddNNNN.

    Returns:
        The parsed CivicNumber, or None if the value is not a valid number.
    """
    if value is None:
        return None

    match = _CIVIC_NUMBER_PATTERN.match(value.strip())
    if match is None:
        return None

    yymmdd = match.group("yymmdd")
    serial = match.group("serial")
    century = match.group("century")
    if century is None:
        century = str(_resolve_century(int(yymmdd[0:2]), match.group("separator"), today or date.today()))

    normalized = f"{century}{yymmdd}{serial}"

    year = int(normalized[0:4])
    month = int(normalized[4:6])
    day = int(normalized[6:8])
    if day > CivicNumberConstants.SAMORDNING_DAY_OFFSET:
        day -= CivicNumberConstants.SAMORDNING_DAY_OFFSET

    if not 1 <= month <= 12:
        return None
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        return None
    if not _luhn_valid(normalized[2:]):
        return None

    return CivicNumber(normalized=normalized, original=value)


def require_civic_number(value: Optional[str]) -> CivicNumber:
    """Parse a civic number, raising InvalidCivicNumberError if it is invalid."""
    civic_number = parse_civic_number(value)
    if civic_number is None:
        raise InvalidCivicNumberError(value)
    return civic_number
