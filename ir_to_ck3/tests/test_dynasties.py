"""
Tests for dynasty and house cleanup.
"""
from __future__ import annotations

from ir_to_ck3.dynasties import Dynasty, DynastyCollection, House, HouseCollection
from ir_to_ck3.game_date import GameDate

BOOKMARK = GameDate(867)


def _in_house(character, house_id, date=None):
    character.history.add_field_value(date, "dynasty_house", "dynasty_house", house_id)
    return character


class TestPurgeUnneeded:
    """Tests for removing memberless houses and dynasties."""

    def test_houses_without_members_removed(self, make_character, sample_dynasties):
        """Test that only referenced houses survive."""
        dynasties, houses = sample_dynasties
        houses.add(House("house_empty", "dyn_julii"))
        member = _in_house(make_character("m"), "house_caesar")
        assert houses.purge_unneeded_houses([member], BOOKMARK) == 1
        assert houses.keys() == ["house_caesar"]

    def test_past_membership_counts(self, make_character, sample_dynasties):
        """Test that a house referenced at any date is kept."""
        _, houses = sample_dynasties
        member = _in_house(make_character("m"), "house_caesar", GameDate(700))
        member.history.add_field_value(GameDate(800), "dynasty_house", "dynasty_house", "house_other")
        assert houses.purge_unneeded_houses([member], BOOKMARK) == 0

    def test_dynasties_without_houses_or_members_removed(self, make_character, sample_dynasties):
        """Test that dynasties kept by a house or a direct member survive."""
        dynasties, houses = sample_dynasties
        dynasties.add(Dynasty("dyn_direct"))
        member = make_character("m", dynasty="dyn_direct")
        assert dynasties.purge_unneeded_dynasties([member], houses, BOOKMARK) == 1
        assert dynasties.keys() == ["dyn_julii", "dyn_direct"]


class TestFlattenDynasties:
    """Tests for dynasties whose founder was removed."""

    def test_houses_merged_into_dynasty(self, make_character, sample_dynasties):
        """Test that house members become direct members and the eldest becomes founder."""
        dynasties, houses = sample_dynasties
        elder = _in_house(make_character("elder", birth="650.1.1"), "house_caesar")
        younger = _in_house(make_character("younger", birth="680.1.1"), "house_caesar", GameDate(700))
        assert dynasties.flatten_dynasties_with_no_founders([elder, younger], houses, BOOKMARK) == 1
        assert houses.keys() == []
        assert dynasties["dyn_julii"].founder_id == "elder"
        assert elder.get_dynasty_id(BOOKMARK) == "dyn_julii"
        assert younger.history.fields["dynasty"].date_to_entries[GameDate(700)] == [("dynasty", "dyn_julii")]
        assert elder.get_house_id(BOOKMARK) is None

    def test_dynasty_with_living_founder_untouched(self, make_character, sample_dynasties):
        """Test that dynasties whose founder exists keep their houses."""
        dynasties, houses = sample_dynasties
        founder = _in_house(make_character("founder"), "house_caesar")
        assert dynasties.flatten_dynasties_with_no_founders([founder], houses, BOOKMARK) == 0
        assert houses.keys() == ["house_caesar"]

    def test_dynasty_without_members_loses_founder(self, sample_dynasties):
        """Test that a flattened dynasty without members gets no founder."""
        dynasties, houses = sample_dynasties
        dynasties.flatten_dynasties_with_no_founders([], houses, BOOKMARK)
        assert dynasties["dyn_julii"].founder_id is None


def test_houses_of_dynasty():
    houses = HouseCollection([House("h1", "d1"), House("h2", "d2"), House("h3", "d1")])
    assert [house.id for house in houses.houses_of_dynasty("d1")] == ["h1", "h3"]
    assert DynastyCollection().keys() == []
