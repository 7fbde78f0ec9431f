"""
archive_system.py

In-memory registry of spellbooks and students.

`SpellbookArchive` owns every `SpellBook` and `Student`, mediates all rentals
and returns so the two sides of a loan stay consistent, and answers the
catalog and history queries used by the command layer.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from archive_models import Outcome, SpellBook, Student

# Configuration
FIRST_STUDENT_NUMBER = 100000
CATALOG_COLUMNS = ["serialNumber", "title", "inventor", "type", "heldBy"]

logger = logging.getLogger("SpellbookArchive")


class SpellbookArchive:
    """
    SpellbookArchive keeps spellbooks keyed by serial number and students keyed
    by student number.

    Operations that can fail return an `Outcome` instead of raising. When more
    than one failure applies, the coarser one wins: an empty archive is reported
    before a missing id.
    """

    def __init__(self, first_student_number: int = FIRST_STUDENT_NUMBER):
        self._students: Dict[int, Student] = {}
        self._spellbooks: Dict[int, SpellBook] = {}
        self._next_student_number = int(first_student_number)

    # ---------------- Students ----------------
    def add_student(self, name: str) -> Student:
        """
        Register a new student under the next free student number.

        Numbers are handed out sequentially and never reused.
        """
        student = Student(self._next_student_number, name)
        self._next_student_number += 1
        self._students[student.student_number] = student
        logger.info("Added student %s", student)
        return student

    def get_student(self, student_number: int) -> Optional[Student]:
        return self._students.get(student_number)

    def has_students(self) -> bool:
        return bool(self._students)

    def spellbooks_held_by(self, student: Student) -> List[SpellBook]:
        """Spellbooks currently rented by `student`, in checkout order."""
        return [self._spellbooks[serial] for serial in student.currently_holding]

    def spellbook_history_of(self, student: Student) -> List[SpellBook]:
        """Spellbooks previously rented by `student`, in return order."""
        return [self._spellbooks[serial] for serial in student.history]

    # ---------------- Spellbooks ----------------
    def add_spellbook(self, spellbook: SpellBook) -> bool:
        """
        Add a spellbook to the catalog.

        Returns True on success, False if the serial number is already taken.
        """
        if spellbook.serial_number in self._spellbooks:
            logger.debug("Attempt to add existing spellbook: %s", spellbook.serial_number)
            return False
        self._spellbooks[spellbook.serial_number] = spellbook
        logger.info("Added spellbook %s", spellbook.serial_number)
        return True

    def get_spellbook(self, serial_number: int) -> Optional[SpellBook]:
        return self._spellbooks.get(serial_number)

    def has_spellbooks(self) -> bool:
        return bool(self._spellbooks)

    # ---------------- Rentals ----------------
    def _resolve_student(self, student_number: int) -> Outcome:
        if not self._students:
            return Outcome.NO_STUDENTS
        if student_number not in self._students:
            return Outcome.NO_SUCH_STUDENT
        return Outcome.SUCCESS

    def rent(self, student_number: int, serial_number: int) -> Outcome:
        """
        Rent spellbook `serial_number` to student `student_number`.

        Failure outcomes, in the order they are checked: NO_STUDENTS,
        NO_SUCH_STUDENT, NO_SPELLBOOKS, NO_SUCH_SPELLBOOK, UNAVAILABLE.
        """
        outcome = self._resolve_student(student_number)
        if not outcome.ok:
            logger.debug("Rent rejected for student %s: %s", student_number, outcome.name)
            return outcome
        if not self._spellbooks:
            return Outcome.NO_SPELLBOOKS
        spellbook = self._spellbooks.get(serial_number)
        if spellbook is None:
            logger.debug("Rent rejected, unknown spellbook %s", serial_number)
            return Outcome.NO_SUCH_SPELLBOOK
        if not spellbook.checkout(student_number):
            logger.debug("Rent rejected, spellbook %s held by %s", serial_number, spellbook.held_by)
            return Outcome.UNAVAILABLE

        self._students[student_number].checkout(spellbook)
        logger.info("Rented %s to %s", serial_number, student_number)
        return Outcome.SUCCESS

    def relinquish(self, student_number: int, serial_number: int) -> Outcome:
        """
        Return spellbook `serial_number` from student `student_number`.

        An unknown serial number and a spellbook the student is not holding
        both give NOT_RENTED.
        """
        outcome = self._resolve_student(student_number)
        if not outcome.ok:
            logger.debug("Return rejected for student %s: %s", student_number, outcome.name)
            return outcome
        if not self._spellbooks:
            return Outcome.NO_SPELLBOOKS

        student = self._students[student_number]
        spellbook = self._spellbooks.get(serial_number)
        if spellbook is None or not student.checkin(spellbook):
            logger.debug("Student %s is not holding spellbook %s", student_number, serial_number)
            return Outcome.NOT_RENTED

        spellbook.checkin()
        logger.info("Spellbook %s returned by %s", serial_number, student_number)
        return Outcome.SUCCESS

    def relinquish_all(self, student_number: int) -> Outcome:
        """
        Return every spellbook the student holds.

        Succeeds for any known student, including one holding nothing.
        """
        outcome = self._resolve_student(student_number)
        if not outcome.ok:
            logger.debug("Return-all rejected for student %s: %s", student_number, outcome.name)
            return outcome

        returned = self._students[student_number].checkin_all()
        for serial in returned:
            self._spellbooks[serial].checkin()
        logger.info("Student %s returned %d spellbook(s)", student_number, len(returned))
        return Outcome.SUCCESS

    # ---------------- Queries ----------------
    def all_spellbooks(self) -> List[SpellBook]:
        return sorted(self._spellbooks.values(), key=lambda s: s.serial_number)

    def available_spellbooks(self) -> List[SpellBook]:
        return [s for s in self.all_spellbooks() if s.is_available()]

    def all_types(self) -> List[str]:
        return sorted({s.type for s in self._spellbooks.values()})

    def all_inventors(self) -> List[str]:
        return sorted({s.inventor for s in self._spellbooks.values()})

    def spellbooks_by_type(self, type_name: str) -> List[SpellBook]:
        """Spellbooks whose type equals `type_name`, ignoring case."""
        wanted = type_name.lower()
        return [s for s in self.all_spellbooks() if s.type.lower() == wanted]

    def spellbooks_by_inventor(self, inventor: str) -> List[SpellBook]:
        """Spellbooks whose inventor equals `inventor`, ignoring case."""
        wanted = inventor.lower()
        return [s for s in self.all_spellbooks() if s.inventor.lower() == wanted]

    def catalog_frame(self) -> pd.DataFrame:
        """
        Build a DataFrame of the catalog, one row per spellbook.

        Columns: serialNumber, title, inventor, type, heldBy. Rows are in
        ascending serial order.
        """
        rows = [
            {
                "serialNumber": s.serial_number,
                "title": s.title,
                "inventor": s.inventor,
                "type": s.type,
                "heldBy": s.held_by,
            }
            for s in self.all_spellbooks()
        ]
        return pd.DataFrame(rows, columns=CATALOG_COLUMNS)

    def copy_counts(self) -> Dict[str, int]:
        """
        Count copies of each distinct spellbook.

        Spellbooks are copies when they share title and inventor. The result
        maps the short string of each group's lowest-serial member to the group
        size, ordered by title, then inventor, then that serial.
        """
        df = self.catalog_frame()
        if df.empty:
            return {}
        groups = (
            df.groupby(["title", "inventor"], sort=False)
            .agg(first_serial=("serialNumber", "min"), copies=("serialNumber", "size"))
            .reset_index()
            .sort_values(["title", "inventor", "first_serial"], kind="mergesort")
        )
        counts: Dict[str, int] = {}
        for row in groups.itertuples(index=False):
            representative = self._spellbooks[int(row.first_serial)]
            counts[representative.short_string()] = int(row.copies)
        return counts

    def check_common_query(self, student_numbers: Iterable[int]) -> Outcome:
        """
        Validate the students named in a common-history query.

        Outcomes, in the order they are checked: DUPLICATE, NO_STUDENTS,
        NO_SUCH_STUDENT (also for an empty list), NO_SPELLBOOKS, SUCCESS.
        """
        numbers = list(student_numbers)
        if len(set(numbers)) != len(numbers):
            return Outcome.DUPLICATE
        if not self._students:
            return Outcome.NO_STUDENTS
        if not numbers or any(n not in self._students for n in numbers):
            return Outcome.NO_SUCH_STUDENT
        if not self._spellbooks:
            return Outcome.NO_SPELLBOOKS
        return Outcome.SUCCESS

    def find_common_spellbooks(self, student_numbers: Iterable[int]) -> List[SpellBook]:
        """
        Spellbooks present in the rental history of every listed student.

        Copies are distinct spellbooks here: only the same serial number counts
        as common. Returns an empty list when the list is empty, names an
        unknown student, or repeats a student. Sorted by title, then serial.
        """
        numbers = list(student_numbers)
        if not numbers or len(set(numbers)) != len(numbers):
            return []
        students = [self._students.get(n) for n in numbers]
        if any(s is None for s in students):
            return []

        common = set(students[0].history)
        for student in students[1:]:
            common &= set(student.history)
        return sorted(
            (self._spellbooks[serial] for serial in common),
            key=lambda s: (s.title, s.serial_number),
        )
