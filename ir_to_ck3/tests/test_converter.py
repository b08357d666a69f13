"""
Tests for the end-to-end character conversion.
"""
from __future__ import annotations

import pytest

from ir_to_ck3.config import ConversionConfig
from ir_to_ck3.converter import CharacterConverter
from ir_to_ck3.errors import ConversionError
from ir_to_ck3.game_date import GameDate
from ir_to_ck3.source_character import SourceCharacterCollection
from ir_to_ck3.titles import LandedTitles, Title


class RecordingHooks:
    def __init__(self, stop: bool = False):
        self.steps = []
        self.stop = stop

    def report_step(self, info="", target=None, reset_counter=False, plus_step=0):
        if info:
            self.steps.append(info)

    def stop_requested(self):
        return self.stop


@pytest.fixture
def world(make_source):
    kingdom = Title("k_rome", source_country_id="ROM", source_country_gold=50.0)
    kingdom.set_holder("imperator1", GameDate(700))
    sources = SourceCharacterCollection([
        make_source("1", name="Marcus", family_id="7", spouse_ids=["2"], children_ids=["4"]),
        make_source("2", female=True, death="720.1.1", name="Julia", family_id="7", spouse_ids=["1"],
                    children_ids=["4"]),
        make_source("3", death="710.1.1"),
        make_source("4", birth="715.1.1", mother_id="2", father_id="1", family_id="7"),
    ])
    return sources, LandedTitles([kingdom])


class TestCharacterConverter:
    """Tests for CharacterConverter."""

    def test_convert_runs_all_stages(self, world, mappers, loc_db, config):
        """Test import, linking and purge on a small world."""
        sources, titles = world
        converter = CharacterConverter(config, mappers, loc_db, titles)
        characters = converter.convert(sources)

        assert characters.keys() == ["imperator1", "imperator2", "imperator4"]
        assert converter.purge_result.removed_ids == ["imperator3"]
        ruler = characters["imperator1"]
        assert ruler.children == {"imperator4": characters["imperator4"]}
        assert ruler.spouse_date("imperator2") == GameDate(715, 1, 1).change_by_days(-280)
        assert ruler.gold == pytest.approx(50.0 * config.currency_rate)

    def test_preserve_list_applied(self, world, mappers, loc_db, tmp_path):
        """Test that characters on the preserve list survive the purge."""
        sources, titles = world
        path = tmp_path / "preserve.txt"
        path.write_text("keep_as_is = { imperator3 }\n", encoding="utf-8")
        config = ConversionConfig.from_dict({"max_workers": 2, "characters_to_preserve_path": str(path)})
        characters = CharacterConverter(config, mappers, loc_db, titles).convert(sources)
        assert "imperator3" in characters
        assert characters["imperator3"].is_non_removable

    def test_progress_reported_through_hooks(self, world, mappers, loc_db, config):
        """Test that stage names go to the application hooks."""
        sources, titles = world
        hooks = RecordingHooks()
        CharacterConverter(config, mappers, loc_db, titles, app_hooks=hooks).convert(sources)
        assert hooks.steps == ["Importing Imperator characters...", "Purging unneeded characters"]

    def test_stop_requested(self, world, mappers, loc_db, config):
        """Test that a stop request ends the run after the current stage."""
        sources, titles = world
        converter = CharacterConverter(config, mappers, loc_db, titles, app_hooks=RecordingHooks(stop=True))
        with pytest.raises(ConversionError, match="stopped"):
            converter.convert(sources)
        assert converter.purge_result is None
        assert len(converter.characters) == 4
