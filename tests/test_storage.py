"""Tests for persisted settings and lifetime records."""

import struct

from ruckcore.engine.core import Engine
from ruckcore.engine.profiles import TerrainType
from ruckcore.engine.state import EngineConfig, LifetimeTotals
from ruckcore.engine.units import Unit
from ruckcore.storage import (
    LIFETIME_CALORIES_KEY,
    LIFETIME_DISTANCE_KEY,
    SETTINGS_KEY,
    SETTINGS_SIZE,
    FileStore,
    MemoryStore,
    decode_settings,
    encode_settings,
    load_lifetime,
    load_settings,
    save_lifetime,
    save_settings,
)
from tests.conftest import T0, make_config


class TestSettingsRecord:
    def test_fixed_size(self):
        assert len(encode_settings(EngineConfig())) == SETTINGS_SIZE

    def test_roundtrip(self, memory_store):
        config = make_config(weight_value=765, weight_unit=Unit.imperial, sim_steps_spm=110)
        config.profiles.set_active(2)
        config.profiles.set_name(1, "Tracks")
        config.profiles.profiles[2].terrain_type = TerrainType.snow
        save_settings(memory_store, config)

        loaded = load_settings(memory_store)
        assert loaded.weight_value == 765
        assert loaded.weight_unit == Unit.imperial
        assert loaded.sim_steps_spm == 110
        assert loaded.profiles.active_index() == 2
        assert loaded.profiles.profiles[1].name == "Tracks"
        assert loaded.profiles.profiles[2].terrain_type == TerrainType.snow
        assert [p.ruck_weight_value for p in loaded.profiles.profiles] == [136, 80, 120]

    def test_absent_record_gives_defaults(self, memory_store):
        loaded = load_settings(memory_store)
        assert loaded.weight_value == 800
        assert loaded.stride_value == 780
        assert loaded.sim_steps_enabled is True
        assert loaded.sim_steps_spm == 122
        assert loaded.profiles.profiles[0].terrain_factor == 150
        assert loaded.profiles.display_name(1) == "One Mabel, roads and tracks"

    def test_short_record_overlays_defaults(self):
        # only weight and weight unit survive
        blob = struct.pack("<2i", 650, 1)
        loaded = decode_settings(blob)
        assert loaded.weight_value == 650
        assert loaded.weight_unit == Unit.imperial
        assert loaded.stride_value == 780
        assert loaded.profiles.profiles[0].ruck_weight_value == 136

    def test_terrain_normalized_on_load(self):
        config = make_config(terrain_factor=115)
        loaded = decode_settings(encode_settings(config))
        assert loaded.profiles.profiles[0].terrain_factor == 120

    def test_invalid_terrain_text_is_none(self):
        blob = bytearray(encode_settings(EngineConfig()))
        blob[-8:] = b"lava\0\0\0\0"
        loaded = decode_settings(bytes(blob))
        assert loaded.profiles.profiles[2].terrain_type is None

    def test_long_name_truncated_to_field(self):
        config = make_config()
        config.profiles.profiles[0].name = "n" * 40
        loaded = decode_settings(encode_settings(config))
        assert loaded.profiles.profiles[0].name == "n" * 32

    def test_non_ascii_name_survives_reload(self, memory_store, test_settings):
        engine = Engine(config=make_config(), store=memory_store, settings=test_settings)
        engine.apply_config({"profile3_name": "Überlandmarsch über Öl und Äcker"}, T0)
        shown = engine.config.profiles.display_name(2)

        reloaded = Engine.load(memory_store, test_settings)
        assert reloaded.config.profiles.display_name(2) == shown

    def test_short_non_ascii_name_roundtrip(self):
        config = make_config()
        config.profiles.set_name(0, "Gästeweg 🥾")
        loaded = decode_settings(encode_settings(config))
        assert loaded.profiles.profiles[0].name == "Gästeweg 🥾"

    def test_out_of_range_value_not_persisted(self, memory_store, caplog):
        config = make_config(weight_value=2**40)
        with caplog.at_level("WARNING", logger="ruckcore.storage"):
            save_settings(memory_store, config)
        assert memory_store.read(SETTINGS_KEY) is None
        assert "not persisted" in caplog.text


class TestLifetimeRecords:
    def test_roundtrip(self, memory_store):
        save_lifetime(memory_store, LifetimeTotals(distance_m=1095, calories_kcal=58))
        loaded = load_lifetime(memory_store)
        assert (loaded.distance_m, loaded.calories_kcal) == (1095, 58)

    def test_absent_is_zero(self, memory_store):
        loaded = load_lifetime(memory_store)
        assert (loaded.distance_m, loaded.calories_kcal) == (0, 0)

    def test_short_is_zero(self):
        store = MemoryStore({LIFETIME_DISTANCE_KEY: b"\x01\x02", LIFETIME_CALORIES_KEY: b""})
        loaded = load_lifetime(store)
        assert (loaded.distance_m, loaded.calories_kcal) == (0, 0)

    def test_negative_is_zero(self):
        store = MemoryStore({LIFETIME_DISTANCE_KEY: struct.pack("<i", -50)})
        assert load_lifetime(store).distance_m == 0


class TestFileStore:
    def test_roundtrip(self, tmp_path):
        store = FileStore(tmp_path / "records")
        save_lifetime(store, LifetimeTotals(distance_m=42, calories_kcal=7))
        assert (tmp_path / "records" / "2.bin").exists()
        loaded = load_lifetime(FileStore(tmp_path / "records"))
        assert (loaded.distance_m, loaded.calories_kcal) == (42, 7)

    def test_missing_key(self, tmp_path):
        assert FileStore(tmp_path).read(SETTINGS_KEY) is None

    def test_write_failure_logged(self, tmp_path, caplog):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        store = FileStore(blocker)
        with caplog.at_level("WARNING", logger="ruckcore.storage"):
            store.write(SETTINGS_KEY, b"data")
        assert "Failed to write record 1" in caplog.text
