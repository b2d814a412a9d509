import json
from pathlib import Path


def test_settings_defaults_load_when_missing(tmp_path: Path):
    from deskcalc.settings import SettingsStore

    store = SettingsStore(home=tmp_path)
    data = store.load()
    assert isinstance(data, dict)
    assert data.get("schema_version") == 1
    assert data["format"] == "g"
    assert data["precision"] == -1
    assert data["radix_char"] == "C"
    assert data["angle_mode"] == "r"
    assert set(data["docks"]) == {"history", "functions", "variables", "constants"}


def test_settings_roundtrip_save_load(tmp_path: Path):
    from deskcalc.settings import SettingsStore

    store = SettingsStore(home=tmp_path)
    store.save(
        {
            "schema_version": 1,
            "format": "f",
            "precision": 8,
            "history": ["1+1"],
            "history_results": ["2"],
            "variables": ["k=5"],
            "docks": {"history": {"floating": True, "x": 10, "y": 20, "width": 300, "height": 200}},
        }
    )

    loaded = store.load()
    assert loaded["format"] == "f"
    assert loaded["precision"] == 8
    assert loaded["variables"] == ["k=5"]
    assert loaded["docks"]["history"] == {"floating": True, "x": 10, "y": 20, "width": 300, "height": 200}
    # panels missing from the file fall back to defaults
    assert loaded["docks"]["constants"]["floating"] is False
    assert loaded["last_saved_at"]


def test_settings_keep_unknown_keys(tmp_path: Path):
    from deskcalc.settings import SettingsStore

    store = SettingsStore(home=tmp_path)
    store.path().write_text(json.dumps({"future_option": [1, 2]}), encoding="utf-8")

    loaded = store.load()
    assert loaded["future_option"] == [1, 2]
    assert loaded["format"] == "g"


def test_settings_partial_dock_entry_is_merged(tmp_path: Path):
    from deskcalc.settings import SettingsStore

    store = SettingsStore(home=tmp_path)
    store.path().write_text(json.dumps({"docks": {"variables": {"floating": True}}}), encoding="utf-8")

    geom = store.load()["docks"]["variables"]
    assert geom == {"floating": True, "x": 0, "y": 0, "width": 0, "height": 0}


def test_settings_corrupt_json_is_backed_up(tmp_path: Path):
    from deskcalc.settings import SettingsStore

    store = SettingsStore(home=tmp_path)
    p = store.path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("{not valid json", encoding="utf-8")

    loaded = store.load()
    assert loaded.get("schema_version") == 1

    # A backup should exist
    baks = sorted(p.parent.glob(p.name + ".bak.*"))
    assert baks, "Expected a backup to be created for corrupt settings"


def test_settings_update_patches_file(tmp_path: Path):
    from deskcalc.settings import SettingsStore

    store = SettingsStore(home=tmp_path / "nested")
    store.update({"radix_char": ","})

    loaded = store.load()
    assert loaded["radix_char"] == ","
    assert loaded["format"] == "g"
    assert not list((tmp_path / "nested").glob("*.tmp"))
