"""ir_to_ck3 package: Converts Imperator: Rome characters into the Crusader Kings III character graph."""

from ir_to_ck3.character import Character, Pregnancy
from ir_to_ck3.character_collection import CharacterCollection
from ir_to_ck3.character_factory import CharacterFactory
from ir_to_ck3.config import ConversionConfig
from ir_to_ck3.converter import CharacterConverter
from ir_to_ck3.counterparts import CounterpartMap
from ir_to_ck3.dynasties import Dynasty, DynastyCollection, House, HouseCollection
from ir_to_ck3.errors import ConversionError
from ir_to_ck3.game_date import GameDate
from ir_to_ck3.history import History, LiteralHistoryField, SimpleHistoryField
from ir_to_ck3.importer import CharacterImporter, ConcurrentWarningSet
from ir_to_ck3.linker import RelationshipLinker, estimate_marriage_date
from ir_to_ck3.marriage import Marriage
from ir_to_ck3.purge import PurgeResult
from ir_to_ck3.source_character import SourceCharacter, SourceCharacterCollection, Unborn
from ir_to_ck3.titles import LandedTitles, Title

__all__ = [
    "Character",
    "CharacterCollection",
    "CharacterConverter",
    "CharacterFactory",
    "CharacterImporter",
    "ConcurrentWarningSet",
    "ConversionConfig",
    "ConversionError",
    "CounterpartMap",
    "Dynasty",
    "DynastyCollection",
    "GameDate",
    "History",
    "House",
    "HouseCollection",
    "LandedTitles",
    "LiteralHistoryField",
    "Marriage",
    "Pregnancy",
    "PurgeResult",
    "RelationshipLinker",
    "SimpleHistoryField",
    "SourceCharacter",
    "SourceCharacterCollection",
    "Title",
    "Unborn",
    "estimate_marriage_date",
]
