"""
archive_models.py

Record types held by the spellbook archive: spellbooks, students and the
outcome codes returned by archive operations.

Transition methods (checkout/checkin) are meant to be called by
`SpellbookArchive` only; the state they change is kept in private attributes
and exposed read-only.
"""

from __future__ import annotations
from enum import Enum, auto
import re
from typing import List, Optional, Tuple

# Integers as student and serial numbers are written: ASCII digits, signed 32-bit
INT_PATTERN = re.compile(r"[+-]?[0-9]+")
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def parse_int(text: str) -> Optional[int]:
    """
    Parse `text` as a student or serial number.

    Returns None unless it is an optionally signed run of ASCII digits within
    the signed 32-bit range.
    """
    if not INT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if value < INT_MIN or value > INT_MAX:
        return None
    return value


class Outcome(Enum):
    SUCCESS = auto()
    NO_STUDENTS = auto()
    NO_SUCH_STUDENT = auto()
    NO_SPELLBOOKS = auto()
    NO_SUCH_SPELLBOOK = auto()
    UNAVAILABLE = auto()
    NOT_RENTED = auto()
    DUPLICATE = auto()
    # bulk file operations
    NO_SUCH_FILE = auto()
    FILE_ERROR = auto()
    NOT_IN_FILE = auto()
    NOTHING_ADDED = auto()

    @property
    def ok(self) -> bool:
        return self is Outcome.SUCCESS


class SpellBook:
    """
    A single lendable copy in the catalog.

    Identified by its serial number. `held_by` is the student number of the
    current renter (None when available) and `history` lists the student
    numbers of completed rentals in return order.
    """

    def __init__(self, serial_number: int, title: str, inventor: str, type_name: str):
        self._serial_number = int(serial_number)
        self._title = title
        self._inventor = inventor
        self._type = type_name
        self._held_by: Optional[int] = None
        self._history: List[int] = []

    @property
    def serial_number(self) -> int:
        return self._serial_number

    @property
    def title(self) -> str:
        return self._title

    @property
    def inventor(self) -> str:
        return self._inventor

    @property
    def type(self) -> str:
        return self._type

    @property
    def held_by(self) -> Optional[int]:
        return self._held_by

    @property
    def history(self) -> Tuple[int, ...]:
        return tuple(self._history)

    def is_available(self) -> bool:
        return self._held_by is None

    def checkout(self, student_number: int) -> bool:
        """
        Mark this spellbook as rented by `student_number`.

        Returns False, leaving the spellbook untouched, if it is already rented.
        """
        if self._held_by is not None:
            return False
        self._held_by = student_number
        return True

    def checkin(self) -> bool:
        """
        Return this spellbook, recording the renter in its history.

        Returns False if the spellbook was not rented.
        """
        if self._held_by is None:
            return False
        self._history.append(self._held_by)
        self._held_by = None
        return True

    def is_copy_of(self, other: SpellBook) -> bool:
        return self._title == other.title and self._inventor == other.inventor

    def short_string(self) -> str:
        return f"{self._title} ({self._inventor})"

    def long_string(self) -> str:
        header = f"{self._serial_number}: {self._title} ({self._inventor}, {self._type})"
        if self._held_by is None:
            status = "Currently available."
        else:
            status = f"Rented by: {self._held_by}."
        return f"{header}\n{status}"

    def __str__(self) -> str:
        return self.short_string()

    def __repr__(self) -> str:
        return f"SpellBook({self._serial_number!r}, {self._title!r}, {self._inventor!r}, {self._type!r})"


class Student:
    """
    A student account.

    Holdings and history store spellbook serial numbers rather than the
    spellbooks themselves; the archive resolves them.
    """

    def __init__(self, student_number: int, name: str):
        self._student_number = int(student_number)
        self._name = name
        self._currently_holding: List[int] = []
        self._history: List[int] = []

    @property
    def student_number(self) -> int:
        return self._student_number

    @property
    def name(self) -> str:
        return self._name

    @property
    def currently_holding(self) -> Tuple[int, ...]:
        return tuple(self._currently_holding)

    @property
    def history(self) -> Tuple[int, ...]:
        return tuple(self._history)

    def checkout(self, spellbook: SpellBook) -> None:
        # availability is validated by the archive before this is called
        self._currently_holding.append(spellbook.serial_number)

    def checkin(self, spellbook: SpellBook) -> bool:
        """
        Move `spellbook` from current holdings to history.

        Returns False if this student is not holding it.
        """
        serial = spellbook.serial_number
        if serial not in self._currently_holding:
            return False
        self._currently_holding.remove(serial)
        self._history.append(serial)
        return True

    def checkin_all(self) -> List[int]:
        """
        Move every held spellbook to history, keeping checkout order.

        Returns the serial numbers that were moved.
        """
        returned = list(self._currently_holding)
        self._history.extend(returned)
        self._currently_holding.clear()
        return returned

    def __str__(self) -> str:
        return f"{self._student_number}: {self._name}"

    def __repr__(self) -> str:
        return f"Student({self._student_number!r}, {self._name!r})"
