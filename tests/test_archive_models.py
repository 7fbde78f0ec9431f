from archive_models import Outcome, SpellBook, Student, parse_int


def test_new_spellbook_is_available():
    s = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    assert s.is_available()
    assert s.held_by is None
    assert s.history == ()


def test_checkout_then_checkin_records_history_once():
    s = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    assert s.checkout(100000)
    assert not s.is_available()
    assert s.held_by == 100000
    assert s.history == ()

    assert s.checkin()
    assert s.is_available()
    assert s.history == (100000,)


def test_checkout_of_held_spellbook_fails_without_change():
    s = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    s.checkout(100000)
    assert not s.checkout(100001)
    assert s.held_by == 100000
    assert s.history == ()


def test_checkin_of_available_spellbook_fails_without_change():
    s = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    assert not s.checkin()
    assert s.is_available()
    assert s.history == ()


def test_history_view_cannot_mutate_state():
    s = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    s.checkout(100000)
    s.checkin()
    view = s.history
    assert isinstance(view, tuple)
    assert s.history == (100000,)


def test_is_copy_of_compares_title_and_inventor():
    a = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    b = SpellBook(2, "Lumos Maxima", "Flitwick", "Jinx")
    c = SpellBook(3, "Lumos Maxima", "Snape", "Charm")
    d = SpellBook(4, "lumos maxima", "Flitwick", "Charm")
    assert a.is_copy_of(b)
    assert not a.is_copy_of(c)
    assert not a.is_copy_of(d)


def test_display_strings():
    s = SpellBook(7, "Lumos Maxima", "Flitwick", "Charm")
    assert s.short_string() == "Lumos Maxima (Flitwick)"
    assert str(s) == "Lumos Maxima (Flitwick)"
    assert s.long_string() == "7: Lumos Maxima (Flitwick, Charm)\nCurrently available."
    s.checkout(100003)
    assert s.long_string() == "7: Lumos Maxima (Flitwick, Charm)\nRented by: 100003."


def test_student_checkin_moves_to_history():
    student = Student(100000, "Harry Potter")
    s = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    student.checkout(s)
    assert student.currently_holding == (1,)
    assert student.checkin(s)
    assert student.currently_holding == ()
    assert student.history == (1,)


def test_student_checkin_of_unheld_spellbook_fails():
    student = Student(100000, "Harry Potter")
    s = SpellBook(1, "Lumos Maxima", "Flitwick", "Charm")
    assert not student.checkin(s)
    assert student.history == ()


def test_student_checkin_all_keeps_checkout_order():
    student = Student(100000, "Harry Potter")
    books = [SpellBook(n, f"Book {n}", "Flitwick", "Charm") for n in (5, 2, 9)]
    for b in books:
        student.checkout(b)

    returned = student.checkin_all()

    assert returned == [5, 2, 9]
    assert student.currently_holding == ()
    assert student.history == (5, 2, 9)


def test_student_display():
    assert str(Student(100000, "Harry Potter")) == "100000: Harry Potter"


def test_parse_int():
    assert parse_int("42") == 42
    assert parse_int("+7") == 7
    assert parse_int("-2147483648") == -2147483648
    assert parse_int("2147483647") == 2147483647
    assert parse_int("2147483648") is None
    assert parse_int("99999999999999999999") is None
    assert parse_int("1_000") is None
    assert parse_int("٣") is None
    assert parse_int("1.5") is None
    assert parse_int(" 1") is None
    assert parse_int("") is None


def test_only_success_is_ok():
    assert Outcome.SUCCESS.ok
    assert not any(o.ok for o in Outcome if o is not Outcome.SUCCESS)
