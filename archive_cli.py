#!/usr/bin/env python3
"""
archive_cli.py

Line-oriented command interface for the spellbook archive.

Each input line is one command (see COMMANDS for the full list). Command words
are case-insensitive; commands with missing or non-numeric arguments are
ignored without output.

Typical usage:
    python archive_cli.py --collection spellbooks.csv
"""

from __future__ import annotations
import argparse
import logging
from typing import Dict, List, Optional

from archive_csv import load_collection, load_spellbook, save_collection
from archive_models import Outcome, SpellBook, parse_int
from archive_system import SpellbookArchive

# Configuration
PROMPT = "user: "
LOG_FORMAT = "%(levelname)s: %(message)s"
DEFAULT_LOG_LEVEL = "WARNING"

logger = logging.getLogger("SpellbookArchive")

MESSAGES: Dict[Outcome, str] = {
    Outcome.SUCCESS: "Success.",
    Outcome.NO_STUDENTS: "No students in system.",
    Outcome.NO_SUCH_STUDENT: "No such student in system.",
    Outcome.NO_SPELLBOOKS: "No spellbooks in system.",
    Outcome.NO_SUCH_SPELLBOOK: "No such spellbook in system.",
    Outcome.UNAVAILABLE: "Spellbook is currently unavailable.",
    Outcome.NOT_RENTED: "Unable to return spellbook.",
    Outcome.DUPLICATE: "Duplicate students provided.",
    Outcome.NO_SUCH_FILE: "No such file.",
    Outcome.FILE_ERROR: "Error reading file.",
    Outcome.NOT_IN_FILE: "No such spellbook in file.",
    Outcome.NOTHING_ADDED: "No spellbooks have been added to the system.",
}

COMMANDS = [
    "EXIT ends the archive process",
    "COMMANDS outputs this help string",
    "",
    "LIST ALL [LONG] outputs either the short or long string for all spellbooks",
    "LIST AVAILABLE [LONG] outputs either the short or long string for all available spellbooks",
    "NUMBER COPIES outputs the number of copies of each spellbook",
    "LIST TYPES outputs the name of every type in the system",
    "LIST INVENTORS outputs the name of every inventor in the system",
    "",
    "TYPE <type> outputs the short string of every spellbook with the specified type",
    "INVENTOR <inventor> outputs the short string of every spellbook by the specified inventor",
    "",
    "SPELLBOOK <serialNumber> [LONG] outputs either the short or long string for the specified spellbook",
    "SPELLBOOK HISTORY <serialNumber> outputs the rental history of the specified spellbook",
    "",
    "STUDENT <studentNumber> outputs the information of the specified student",
    "STUDENT SPELLBOOKS <studentNumber> outputs the spellbooks currently rented by the specified student",
    "STUDENT HISTORY <studentNumber> outputs the rental history of the specified student",
    "",
    "RENT <studentNumber> <serialNumber> loans out the specified spellbook to the given student",
    "RELINQUISH <studentNumber> <serialNumber> returns the specified spellbook from the student",
    "RELINQUISH ALL <studentNumber> returns all spellbooks rented by the specified student",
    "",
    "ADD STUDENT <name> adds a student to the system",
    "ADD SPELLBOOK <filename> <serialNumber> adds a spellbook to the system",
    "",
    "ADD COLLECTION <filename> adds a collection of spellbooks to the system",
    "SAVE COLLECTION <filename> saves the system to a csv file",
    "",
    "COMMON <studentNumber1> <studentNumber2> ... outputs the common spellbooks in students' history",
]


def _render_spellbooks(spellbooks: List[SpellBook], long: bool = False) -> List[str]:
    """Short strings one per line, or long strings separated by blank lines."""
    if not long:
        return [s.short_string() for s in spellbooks]
    out: List[str] = []
    for i, s in enumerate(spellbooks):
        if i:
            out.append("")
        out.extend(s.long_string().split("\n"))
    return out


# ---------------- Command handlers ----------------
def _list(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.upper().split()
    if not parts:
        return []
    long = len(parts) > 1 and parts[1] == "LONG"
    what = parts[0]
    if what not in ("ALL", "AVAILABLE", "TYPES", "INVENTORS"):
        return []
    if not archive.has_spellbooks():
        return [MESSAGES[Outcome.NO_SPELLBOOKS]]

    if what == "ALL":
        return _render_spellbooks(archive.all_spellbooks(), long)
    if what == "AVAILABLE":
        available = archive.available_spellbooks()
        if not available:
            return ["No spellbooks available."]
        return _render_spellbooks(available, long)
    if what == "TYPES":
        return archive.all_types()
    return archive.all_inventors()


def _number_copies(archive: SpellbookArchive, args: str) -> List[str]:
    if args.upper() != "COPIES":
        return []
    if not archive.has_spellbooks():
        return [MESSAGES[Outcome.NO_SPELLBOOKS]]
    return [f"{short}: {count}" for short, count in archive.copy_counts().items()]


def _type(archive: SpellbookArchive, type_name: str) -> List[str]:
    if not archive.has_spellbooks():
        return [MESSAGES[Outcome.NO_SPELLBOOKS]]
    spellbooks = archive.spellbooks_by_type(type_name)
    if not spellbooks:
        return [f"No spellbooks with type {type_name}."]
    return _render_spellbooks(spellbooks)


def _inventor(archive: SpellbookArchive, inventor: str) -> List[str]:
    if not archive.has_spellbooks():
        return [MESSAGES[Outcome.NO_SPELLBOOKS]]
    spellbooks = archive.spellbooks_by_inventor(inventor)
    if not spellbooks:
        return [f"No spellbooks by {inventor}."]
    return _render_spellbooks(spellbooks)


def _spellbook(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.split()
    if not parts:
        return []

    if parts[0].upper() == "HISTORY":
        serial = parse_int(parts[1]) if len(parts) > 1 else None
        if serial is None:
            return []
        if not archive.has_spellbooks():
            return [MESSAGES[Outcome.NO_SPELLBOOKS]]
        spellbook = archive.get_spellbook(serial)
        if spellbook is None:
            return [MESSAGES[Outcome.NO_SUCH_SPELLBOOK]]
        if not spellbook.history:
            return ["No rental history."]
        return [str(n) for n in spellbook.history]

    serial = parse_int(parts[0])
    if serial is None:
        return []
    if not archive.has_spellbooks():
        return [MESSAGES[Outcome.NO_SPELLBOOKS]]
    spellbook = archive.get_spellbook(serial)
    if spellbook is None:
        return [MESSAGES[Outcome.NO_SUCH_SPELLBOOK]]
    long = len(parts) > 1 and parts[1].upper() == "LONG"
    return _render_spellbooks([spellbook], long)


def _student(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.split()
    if not parts:
        return []

    view = parts[0].upper()
    if view in ("SPELLBOOKS", "HISTORY") and len(parts) > 1:
        number = parse_int(parts[1])
    else:
        view = "INFO"
        number = parse_int(parts[0])
    if number is None:
        return []

    if not archive.has_students():
        return [MESSAGES[Outcome.NO_STUDENTS]]
    student = archive.get_student(number)
    if student is None:
        return [MESSAGES[Outcome.NO_SUCH_STUDENT]]

    if view == "SPELLBOOKS":
        renting = archive.spellbooks_held_by(student)
        return _render_spellbooks(renting) if renting else ["Student not currently renting."]
    if view == "HISTORY":
        history = archive.spellbook_history_of(student)
        return _render_spellbooks(history) if history else ["No rental history for student."]
    return [str(student)]


def _rent(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.split()
    if len(parts) < 2:
        return []
    number, serial = parse_int(parts[0]), parse_int(parts[1])
    if number is None or serial is None:
        return []
    return [MESSAGES[archive.rent(number, serial)]]


def _relinquish(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.split()
    if len(parts) < 2:
        return []
    if parts[0].upper() == "ALL":
        number = parse_int(parts[1])
        if number is None:
            return []
        return [MESSAGES[archive.relinquish_all(number)]]

    number, serial = parse_int(parts[0]), parse_int(parts[1])
    if number is None or serial is None:
        return []
    return [MESSAGES[archive.relinquish(number, serial)]]


def _add(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.split(None, 1)
    if not parts:
        return []
    what = parts[0].upper()
    rest = parts[1].strip() if len(parts) > 1 else ""

    if what == "STUDENT":
        if not rest:
            return []
        archive.add_student(rest)
        return [MESSAGES[Outcome.SUCCESS]]

    if what == "SPELLBOOK":
        fields = rest.split()
        if len(fields) < 2:
            return []
        serial = parse_int(fields[1])
        if serial is None:
            return []
        result = load_spellbook(archive, fields[0], serial)
        if result.outcome is Outcome.SUCCESS:
            return [f"Successfully added: {result.spellbook.short_string()}."]
        if result.outcome is Outcome.DUPLICATE:
            return ["Spellbook already exists in system."]
        return [MESSAGES[result.outcome]]

    if what == "COLLECTION":
        if not rest:
            return []
        result = load_collection(archive, rest)
        if result.outcome is Outcome.SUCCESS:
            return [f"{result.added} spellbooks successfully added."]
        if result.outcome is Outcome.NO_SUCH_FILE:
            return ["No such collection."]
        return [MESSAGES[result.outcome]]

    return []


def _save(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.split(None, 1)
    if len(parts) < 2 or parts[0].upper() != "COLLECTION":
        return []
    outcome = save_collection(archive, parts[1].strip())
    if outcome is Outcome.FILE_ERROR:
        return ["Error writing file."]
    return [MESSAGES[outcome]]


def _common(archive: SpellbookArchive, args: str) -> List[str]:
    parts = args.split()
    if len(parts) < 2:
        return []

    numbers: List[int] = []
    for part in parts:
        number = parse_int(part)
        if number is None:
            return [MESSAGES[Outcome.NO_SUCH_STUDENT]]
        if number in numbers:
            return [MESSAGES[Outcome.DUPLICATE]]
        numbers.append(number)

    outcome = archive.check_common_query(numbers)
    if not outcome.ok:
        return [MESSAGES[outcome]]
    common = archive.find_common_spellbooks(numbers)
    if not common:
        return ["No common spellbooks."]
    return _render_spellbooks(common)


HANDLERS = {
    "LIST": _list,
    "NUMBER": _number_copies,
    "TYPE": _type,
    "INVENTOR": _inventor,
    "SPELLBOOK": _spellbook,
    "STUDENT": _student,
    "RENT": _rent,
    "RELINQUISH": _relinquish,
    "ADD": _add,
    "SAVE": _save,
    "COMMON": _common,
}


def execute(archive: SpellbookArchive, line: str) -> Optional[List[str]]:
    """
    Run one command line against `archive`.

    Returns the output lines (possibly empty), or None for EXIT.
    """
    tokens = line.strip().split(None, 1)
    if not tokens:
        return []
    command = tokens[0].upper()
    args = tokens[1].strip() if len(tokens) > 1 else ""

    if command == "EXIT":
        return None
    if command == "COMMANDS":
        return list(COMMANDS)
    handler = HANDLERS.get(command)
    if handler is None:
        logger.debug("Ignoring unknown command: %s", command)
        return []
    return handler(archive, args)


# ---------------- CLI loop ----------------
def input_prompt(prompt: str) -> Optional[str]:
    """
    Wrapper around built-in input() that returns a stripped string.

    Returns None on EOF/KeyboardInterrupt.
    """
    try:
        return input(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return None


def cli_loop(archive: SpellbookArchive) -> None:
    """
    Interactive command loop.

    Prints a blank line after the output of every command except EXIT.
    """
    while True:
        line = input_prompt(PROMPT)
        if line is None:
            break
        if not line:
            continue
        output = execute(archive, line)
        if output is None:
            print("Ending Archive process.")
            break
        for text in output:
            print(text)
        print()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Spellbook archive command interface")
    parser.add_argument("--collection", help="CSV file of spellbooks to load at startup")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level for diagnostics written to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    archive = SpellbookArchive()
    if args.collection:
        result = load_collection(archive, args.collection)
        if not result.outcome.ok:
            logger.warning("Startup collection %s not loaded: %s", args.collection, result.outcome.name)
    cli_loop(archive)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
