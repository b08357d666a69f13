import pytest
from ir_to_ck3.localization import LocDB
from ir_to_ck3.mappers import DictMapper, Mappers, ProvinceMapper, TraitMapper


def test_dict_mapper_plain_and_context_values():
    mapper = DictMapper("cultures", {"roman": {"default": "roman", "christian": "italian"}, "greek": "greek"})
    assert mapper.match("greek") == "greek"
    assert mapper.match("roman") == "roman"
    assert mapper.match("roman", context="christian") == "italian"
    assert mapper.match("roman", context="hellenic_pagan") == "roman"
    assert mapper.match("carthaginian") is None
    assert mapper.match(None) is None

def test_trait_mapper_drops_unmapped_and_duplicates():
    mapper = TraitMapper("traits", {"brave": "brave", "fearless": "brave", "wise": "intellect_good_1"})
    assert mapper.match_all(["brave", "fearless", "unknown", "wise"]) == ["brave", "intellect_good_1"]

def test_province_mapper():
    mapper = ProvinceMapper({1: [10, 11], "2": []})
    assert mapper.get_ck3_province_ids("1") == ["10", "11"]
    assert mapper.get_ck3_province_ids(2) == []
    assert mapper.get_ck3_province_ids("3") == []

def test_mappers_from_yaml(tmp_path):
    path = tmp_path / "mappings.yaml"
    path.write_text("religions:\n  roman_pantheon: hellenic_pagan\nprovinces:\n  1: [10]\n", encoding="utf-8")
    mappers = Mappers.from_yaml(path)
    assert mappers.religion.match("roman_pantheon") == "hellenic_pagan"
    assert mappers.province.get_ck3_province_ids("1") == ["10"]
    assert mappers.culture.match("roman") is None

def test_mappers_from_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Mappers.from_yaml(tmp_path / "missing.yaml")

def test_loc_db():
    loc_db = LocDB({"Marcus": "Marcus"})
    loc_db.add_loc("Julia", "Iulia")
    assert "Julia" in loc_db
    assert len(loc_db) == 2
    assert loc_db.get_loc("Julia") == "Iulia"
    assert loc_db.get_loc("Gaius") is None
    assert loc_db.get_loc(None) is None
