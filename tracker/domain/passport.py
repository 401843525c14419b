from __future__ import annotations

from tracker.domain.errors import InvalidFormatError
from tracker.domain.models import Passport

SERIE_LENGTH = 4
NUMBER_LENGTH = 6


def parse_passport(data: str) -> Passport:
    """
    Split a raw "SSSS NNNNNN" passport string into series and number.

    Raises
    ------
    InvalidFormatError
        Unless the string holds exactly two whitespace-separated tokens of
        4 and 6 digits respectively.
    """
    parts = data.split()
    if (
        len(parts) != 2
        or len(parts[0]) != SERIE_LENGTH
        or len(parts[1]) != NUMBER_LENGTH
        or not (parts[0].isdigit() and parts[1].isdigit())
    ):
        raise InvalidFormatError(
            f"invalid passportNumber format {data!r}, expected '**** ******'",
            op="passport.parse",
        )
    return Passport(serie=parts[0], number=parts[1])


__all__ = ["parse_passport"]
