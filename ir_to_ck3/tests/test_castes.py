import pytest
from ir_to_ck3.castes import caste_trait_of, set_character_castes
from ir_to_ck3.cultures import Culture, CultureCollection
from ir_to_ck3.game_date import GameDate

BOOKMARK = GameDate(867)


@pytest.fixture
def cultures():
    return CultureCollection([Culture("bengali", ["tradition_caste_system"]), Culture("roman", [])])


@pytest.fixture
def in_culture(make_character):
    def _create(character_id, culture="bengali", birth="700.1.1", traits=()):
        character = make_character(character_id, birth=birth)
        character.history.add_field_value(None, "culture", "culture", culture)
        for trait in traits:
            character.add_base_trait(trait)
        return character
    return _create

def test_founders_get_caste_from_education(in_culture, cultures):
    scholar = in_culture("scholar", traits=["education_learning_2"])
    warrior = in_culture("warrior", traits=["education_martial_3"])
    assert set_character_castes([scholar, warrior], cultures, BOOKMARK, lambda c: True) == 2
    assert caste_trait_of(scholar) == "brahmin"
    assert caste_trait_of(warrior) == "kshatriya"

def test_children_inherit_father_then_mother(in_culture, cultures):
    father = in_culture("father", birth="650.1.1", traits=["vaishya"])
    mother = in_culture("mother", birth="655.1.1", traits=["shudra"])
    child = in_culture("child", birth="690.1.1", traits=["education_learning_4"])
    orphan_of_mother = in_culture("other", birth="691.1.1")
    child.father = father
    child.mother = mother
    orphan_of_mother.mother = mother
    # processed by birth date, whatever the input order
    set_character_castes([orphan_of_mother, child, mother, father], cultures, BOOKMARK, lambda c: True)
    assert caste_trait_of(child) == "vaishya"
    assert caste_trait_of(orphan_of_mother) == "shudra"
    assert father.base_traits == ["vaishya"]

def test_parent_caste_assigned_before_child(in_culture, cultures):
    parent = in_culture("parent", birth="650.1.1", traits=["education_learning_1"])
    child = in_culture("child", birth="690.1.1")
    child.father = parent
    set_character_castes([child, parent], cultures, BOOKMARK, lambda c: True)
    assert caste_trait_of(child) == "brahmin"

def test_other_cultures_and_non_imported_skipped(in_culture, cultures):
    roman = in_culture("roman", culture="roman")
    ck3 = in_culture("ck3")
    assert set_character_castes([roman, ck3], cultures, BOOKMARK, lambda c: c.id != "ck3") == 0
    assert caste_trait_of(roman) is None
    assert caste_trait_of(ck3) is None

def test_no_caste_cultures():
    assert set_character_castes([], CultureCollection([Culture("roman")]), BOOKMARK, lambda c: True) == 0
