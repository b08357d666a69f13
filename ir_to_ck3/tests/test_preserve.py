import logging

import pytest
from ir_to_ck3.character_collection import CharacterCollection
from ir_to_ck3.errors import ConversionError
from ir_to_ck3.game_date import GameDate
from ir_to_ck3.preserve import PreserveList, apply_preserve_list, parse_preserve_list, read_preserve_list

PRESERVE_TEXT = """
# characters referenced by scripted events
keep_as_is = {
    animation_test_1 163110   # trailing comment
    42
}
after_bookmark_date = { 999 }
"""


def test_parse_blocks_and_comments():
    preserve_list = parse_preserve_list(PRESERVE_TEXT)
    assert preserve_list.keep_as_is == ["animation_test_1", "163110", "42"]
    assert preserve_list.after_bookmark_date == ["999"]

def test_unknown_block_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        preserve_list = parse_preserve_list("remove_me = { 1 2 }\nkeep_as_is = { 3 }")
    assert preserve_list.keep_as_is == ["3"]
    assert "remove_me" in caplog.text

@pytest.mark.parametrize("text", ["keep_as_is = { 1 2", "keep_as_is { 1 }", "= { 1 }", "keep_as_is = { { } }"])
def test_malformed_lists_raise(text):
    with pytest.raises(ConversionError):
        parse_preserve_list(text)

def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_preserve_list(tmp_path / "missing.txt")

def test_apply_keep_as_is(make_character):
    characters = CharacterCollection([make_character("42")])
    assert apply_preserve_list(characters, PreserveList(keep_as_is=["42", "unknown"]), GameDate(867)) == 1
    assert characters["42"].is_non_removable
    assert characters["42"].birth_date == GameDate(700)

def test_apply_after_bookmark_date(make_character):
    character = make_character("999", death="720.1.1")
    character.history.add_field_value(GameDate(710), "employer", "employer", "boss")
    character.history.add_field_value(GameDate(700), "birth", "birth", True)
    character.history.add_field_value(None, "culture", "culture", "roman")
    characters = CharacterCollection([character])

    apply_preserve_list(characters, PreserveList(after_bookmark_date=["999"]), GameDate(867))
    assert character.is_non_removable
    assert character.birth_date == GameDate(867, 1, 2)
    assert character.death_date == GameDate(867, 1, 3)
    assert character.history.fields["employer"].entries_count == 0
    assert character.history.fields["birth"].entries_count == 1
    assert character.get_culture_id() == "roman"
