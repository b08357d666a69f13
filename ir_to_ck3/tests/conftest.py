"""
Pytest fixtures for ir_to_ck3 tests.
"""
from __future__ import annotations

import pytest

from ir_to_ck3.character import Character
from ir_to_ck3.character_collection import CharacterCollection
from ir_to_ck3.character_factory import CharacterFactory
from ir_to_ck3.config import ConversionConfig
from ir_to_ck3.dynasties import Dynasty, DynastyCollection, House, HouseCollection
from ir_to_ck3.game_date import GameDate
from ir_to_ck3.localization import LocDB
from ir_to_ck3.mappers import Mappers
from ir_to_ck3.source_character import SourceCharacter, SourceCharacterCollection
from ir_to_ck3.titles import LandedTitles, Title


@pytest.fixture
def config():
    """Default configuration with a small worker pool."""
    return ConversionConfig.from_dict({"max_workers": 2})


@pytest.fixture
def mappers():
    return Mappers.from_dict({
        "religions": {"roman_pantheon": "hellenic_pagan"},
        "cultures": {"roman": {"default": "roman", "hellenic_pagan": "latin"}},
        "traits": {"brave": "brave", "scholar": "education_learning_3"},
        "nicknames": {"the_great": "nick_the_great"},
        "death_reasons": {"death_battle": "death_battle"},
        "provinces": {"10": ["100", "101"]},
    })


@pytest.fixture
def loc_db():
    return LocDB({"Marcus": "Marcus", "Julia": "Julia"})


@pytest.fixture
def make_character():
    """Create a CK3 Character."""
    def _create(character_id: str, female: bool = False, birth: str = "700.1.1", death: str = None,
                dynasty: str = None) -> Character:
        character = Character(character_id, female=female,
                              birth_date=GameDate.parse(birth),
                              death_date=GameDate.parse(death) if death else None)
        if dynasty is not None:
            character.history.add_field_value(None, "dynasty", "dynasty", dynasty)
        return character

    return _create


@pytest.fixture
def make_source():
    """Create an Imperator SourceCharacter."""
    def _create(source_id: str, birth: str = "700.1.1", death: str = None, **kwargs) -> SourceCharacter:
        return SourceCharacter(id=source_id, birth_date=GameDate.parse(birth),
                               death_date=GameDate.parse(death) if death else None, **kwargs)

    return _create


@pytest.fixture
def factory(mappers, loc_db, config):
    return CharacterFactory(mappers, loc_db, config)


@pytest.fixture
def import_world(factory, config):
    """Import source characters (with relations linked) into a fresh CharacterCollection."""
    def _import(sources, titles: LandedTitles = None) -> CharacterCollection:
        source_characters = SourceCharacterCollection(sources)
        factory.titles = titles
        characters = CharacterCollection()
        characters.import_source_characters(source_characters, factory, config, titles=titles)
        return characters

    return _import


@pytest.fixture
def titles_held_by():
    """LandedTitles where each given character holds one county since the start of history."""
    def _create(*holder_ids: str) -> LandedTitles:
        titles = LandedTitles()
        for index, holder_id in enumerate(holder_ids):
            title = Title(f"c_county_{index}")
            title.set_holder(holder_id, GameDate(1))
            titles.add(title)
        return titles

    return _create


@pytest.fixture
def empty_dynasties():
    return DynastyCollection(), HouseCollection()


@pytest.fixture
def sample_dynasties():
    """Dynasty 'dyn_julii' with house 'house_caesar'; dynasty 'dyn_other' without houses."""
    dynasties = DynastyCollection([Dynasty("dyn_julii", founder_id="founder"), Dynasty("dyn_other")])
    houses = HouseCollection([House("house_caesar", "dyn_julii", founder_id="founder")])
    return dynasties, houses
