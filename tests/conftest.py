import sys
import pathlib

# Add project root to sys.path so the archive modules import when running from a checkout
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import pytest

from archive_models import SpellBook
from archive_system import SpellbookArchive


@pytest.fixture
def archive():
    return SpellbookArchive()


@pytest.fixture
def stocked_archive():
    """Archive with two students (100000, 100001) and four spellbooks."""
    arc = SpellbookArchive()
    arc.add_student("Hermione Granger")
    arc.add_student("Ron Weasley")
    arc.add_spellbook(SpellBook(3, "Wingardium Leviosa", "Flitwick", "Charm"))
    arc.add_spellbook(SpellBook(1, "Lumos Maxima", "Flitwick", "Charm"))
    arc.add_spellbook(SpellBook(2, "Lumos Maxima", "Flitwick", "Charm"))
    arc.add_spellbook(SpellBook(4, "Draught of Peace", "Snape", "Potion"))
    return arc
