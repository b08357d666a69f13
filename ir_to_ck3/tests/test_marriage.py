import pytest
from ir_to_ck3.game_date import GameDate
from ir_to_ck3.marriage import Marriage

class MockCharacter:
    def __init__(self, name):
        self.name = name
    def __str__(self):
        return self.name
    def __repr__(self):
        return f"MockCharacter({self.name!r})"

def test_marriage_init_defaults():
    m = Marriage()
    assert m.people_list == []
    assert m.date is None
    assert m.primary is None

def test_marriage_init_with_people_and_date():
    p1 = MockCharacter("Marcus")
    p2 = MockCharacter("Julia")
    m = Marriage([p1, p2], GameDate(700, 5, 1))
    assert m.people_list == [p1, p2]
    assert m.date == GameDate(700, 5, 1)
    assert m.primary is p1

def test_marriage_str_and_repr():
    m = Marriage([MockCharacter("Marcus"), MockCharacter("Julia")], GameDate(700, 5, 1))
    s = str(m)
    r = repr(m)
    assert "Marcus" in s and "Julia" in s and "700.5.1" in s
    assert "MockCharacter('Marcus')" in r and "GameDate(700, 5, 1)" in r

def test_other_partners_and_partner():
    p1 = MockCharacter("Marcus")
    p2 = MockCharacter("Julia")
    m = Marriage([p1, p2], GameDate(700))
    assert m.other_partners(p1) == [p2]
    assert m.partner(p1) is p2
    assert m.partner(p2) is p1
    solo = Marriage([p1], GameDate(700))
    assert solo.partner(p1) is None
