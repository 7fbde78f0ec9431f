"""
archive_csv.py

Load and save the spellbook catalog as CSV.

Files have four columns, `serialNumber,title,inventor,type`, with an optional
header line. Rows without exactly four fields or with a non-integer serial
number are skipped. Students and rental state are not written.
"""

from __future__ import annotations
import logging
import pathlib
from typing import NamedTuple, Optional, Union

import pandas as pd

from archive_models import Outcome, SpellBook, parse_int
from archive_system import SpellbookArchive

CSV_COLUMNS = ["serialNumber", "title", "inventor", "type"]
HEADER_PREFIX = "serial"

logger = logging.getLogger("SpellbookArchive")

PathLike = Union[str, pathlib.Path]


class LoadResult(NamedTuple):
    outcome: Outcome
    added: int = 0
    spellbook: Optional[SpellBook] = None


def read_rows(path: PathLike) -> pd.DataFrame:
    """
    Parse a catalog file into a DataFrame with the CSV_COLUMNS columns.

    Fields are whitespace-stripped and serialNumber is converted to int; rows
    with a malformed or out-of-range serial are dropped. Rows are kept in file
    order. Raises OSError / UnicodeDecodeError if the file cannot be read.
    """
    text = pathlib.Path(path).read_text(encoding="utf-8")
    lines = pd.Series(text.splitlines(), dtype=object)
    if not lines.empty and lines.iloc[0].strip().startswith(HEADER_PREFIX):
        lines = lines.iloc[1:]

    # Trailing empty fields do not count toward the four columns
    parts = lines.str.rstrip(",").str.split(",")
    parts = parts[parts.str.len() == len(CSV_COLUMNS)]
    if parts.empty:
        return pd.DataFrame(columns=CSV_COLUMNS)

    df = pd.DataFrame(parts.tolist(), columns=CSV_COLUMNS)
    for col in CSV_COLUMNS:
        df[col] = df[col].str.strip()
    # Skip rows whose serial is not a 32-bit ASCII integer, one row at a time
    serials = df["serialNumber"].map(parse_int)
    valid = serials.notna()
    df = df[valid].copy()
    df["serialNumber"] = serials[valid].astype(int)
    return df.reset_index(drop=True)


def _row_to_spellbook(row) -> SpellBook:
    return SpellBook(int(row.serialNumber), row.title, row.inventor, row.type)


def _read_or_outcome(path: PathLike):
    try:
        return read_rows(path), None
    except FileNotFoundError:
        logger.warning("Catalog file not found: %s", path)
        return None, Outcome.NO_SUCH_FILE
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None, Outcome.FILE_ERROR


def load_collection(archive: SpellbookArchive, path: PathLike) -> LoadResult:
    """
    Add every valid row of `path` to the archive.

    Rows whose serial number is already in the archive are skipped and not
    counted. Returns NOTHING_ADDED if no spellbook was added.
    """
    df, failure = _read_or_outcome(path)
    if failure is not None:
        return LoadResult(failure)

    added = 0
    for row in df.itertuples(index=False):
        if archive.add_spellbook(_row_to_spellbook(row)):
            added += 1
    logger.info("Loaded %d spellbook(s) from %s", added, path)
    if added == 0:
        return LoadResult(Outcome.NOTHING_ADDED)
    return LoadResult(Outcome.SUCCESS, added=added)


def load_spellbook(archive: SpellbookArchive, path: PathLike, serial_number: int) -> LoadResult:
    """
    Add the first row of `path` whose serial number is `serial_number`.

    Returns NOT_IN_FILE if no row matches and DUPLICATE if the archive already
    has that serial number.
    """
    df, failure = _read_or_outcome(path)
    if failure is not None:
        return LoadResult(failure)

    matches = df[df["serialNumber"] == serial_number]
    if matches.empty:
        return LoadResult(Outcome.NOT_IN_FILE)

    spellbook = _row_to_spellbook(next(matches.itertuples(index=False)))
    if not archive.add_spellbook(spellbook):
        return LoadResult(Outcome.DUPLICATE, spellbook=spellbook)
    return LoadResult(Outcome.SUCCESS, added=1, spellbook=spellbook)


def save_collection(archive: SpellbookArchive, path: PathLike) -> Outcome:
    """
    Write every spellbook in the archive to `path`, in serial order.

    Returns NO_SPELLBOOKS for an empty archive and FILE_ERROR if the file
    cannot be written.
    """
    if not archive.has_spellbooks():
        return Outcome.NO_SPELLBOOKS
    out_df = archive.catalog_frame()[CSV_COLUMNS]
    try:
        out_df.to_csv(path, index=False, columns=CSV_COLUMNS)
    except OSError as exc:
        logger.warning("Could not write %s: %s", path, exc)
        return Outcome.FILE_ERROR
    logger.info("Saved %d spellbooks to %s", len(out_df), path)
    return Outcome.SUCCESS
