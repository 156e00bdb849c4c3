"""Golden fixed-point values for the Pandolf and ACSM models."""

import pytest

from ruckcore.engine.metabolic import (
    kcal_over,
    pandolf_kcal_per_hour,
    pandolf_metabolic_mw,
    walking_kcal_per_hour,
)

BODY = 80000  # 80.0 kg
LOAD = 13600  # 13.6 kg


class TestPandolf:
    @pytest.mark.parametrize("load", [0, 13600, 500000])
    @pytest.mark.parametrize("grade", [-100, 0, 150])
    def test_zero_mass_is_zero(self, load, grade):
        assert pandolf_metabolic_mw(0, load, 1500, grade, 150) == 0

    def test_negative_mass_is_zero(self):
        assert pandolf_metabolic_mw(-5000, LOAD, 1500, 0, 100) == 0

    def test_standing_unloaded(self):
        # term1 only: 1.5 W
        assert pandolf_metabolic_mw(BODY, 0, 0, 0, 100) == 120000

    def test_standing_loaded(self):
        # 1.5 W + 2 (W+L) (L/W)^2
        assert pandolf_metabolic_mw(BODY, LOAD, 0, 0, 100) == 125410

    def test_walking_with_velocity_correction(self):
        assert pandolf_metabolic_mw(BODY, LOAD, 1638, 0, 100) == 600882

    def test_walking_plain_variant(self):
        assert pandolf_metabolic_mw(BODY, LOAD, 1638, 0, 100, velocity_correction=False) == 502109

    def test_correction_never_lowers_power(self):
        for speed in (500, 1000, 1638, 2500):
            plain = pandolf_metabolic_mw(BODY, LOAD, speed, 50, 120, velocity_correction=False)
            corrected = pandolf_metabolic_mw(BODY, LOAD, speed, 50, 120)
            assert corrected >= plain

    @pytest.mark.parametrize("terrain", [100, 120, 130, 150])
    @pytest.mark.parametrize("grade", [0, 50, 100])
    def test_monotonic_in_speed(self, terrain, grade):
        powers = [pandolf_metabolic_mw(BODY, LOAD, v, grade, terrain) for v in range(0, 5001, 50)]
        assert all(a <= b for a, b in zip(powers, powers[1:]))

    def test_terrain_increases_power(self):
        road = pandolf_metabolic_mw(BODY, LOAD, 1400, 0, 100)
        sand = pandolf_metabolic_mw(BODY, LOAD, 1400, 0, 150)
        assert sand > road

    def test_uphill_costs_more(self):
        flat = pandolf_metabolic_mw(BODY, LOAD, 1400, 0, 100)
        uphill = pandolf_metabolic_mw(BODY, LOAD, 1400, 50, 100)
        assert uphill > flat


class TestPandolfKcal:
    def test_standing(self):
        assert pandolf_kcal_per_hour(120000) == 103

    def test_walking(self):
        assert pandolf_kcal_per_hour(600882) == 517

    def test_zero(self):
        assert pandolf_kcal_per_hour(0) == 0


class TestWalkingKcal:
    def test_resting_floor(self):
        # VO2 3.5 ml/kg/min → 3.5 * 80 * 60 / 200 = 84
        assert walking_kcal_per_hour(BODY, 0, 0) == 84

    def test_flat_walking(self):
        assert walking_kcal_per_hour(BODY, 1638, 0) == 319

    def test_uphill(self):
        # S = 98.28 m/min, G = 0.05: VO2 = 3.5 + 9.828 + 8.8452
        assert walking_kcal_per_hour(BODY, 1638, 50) == 532

    def test_steep_downhill_clamps_to_zero(self):
        assert walking_kcal_per_hour(BODY, 1638, -2000) == 0

    def test_loaded_exceeds_unloaded_at_same_speed(self):
        loaded = pandolf_kcal_per_hour(pandolf_metabolic_mw(BODY, LOAD, 1638, 0, 100))
        assert loaded > walking_kcal_per_hour(BODY, 1638, 0)


class TestKcalOver:
    def test_one_minute(self):
        assert kcal_over(517, 60) == 8

    def test_one_hour(self):
        assert kcal_over(517, 3600) == 517
