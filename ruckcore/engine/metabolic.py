"""Pure stateless metabolic models in fixed-point integers. Never raises.

Scale conventions:
  mass / load      kg × 1000
  speed            mm/s (= m/s × 1000)
  grade            tenths of a percent (= grade fraction × 1000)
  terrain factor   hundredths (100 = 1.00×)
"""

from __future__ import annotations

from ruckcore.engine.fixed_point import isqrt, tdiv

Q6 = 1_000_000


# ---------------------------------------------------------------------------
# Pandolf load-carriage model
# ---------------------------------------------------------------------------

def pandolf_metabolic_mw(
    mass_kg1000: int,
    load_kg1000: int,
    speed_mmps: int,
    grade_tenths: int,
    terrain_hundredths: int,
    velocity_correction: bool = True,
) -> int:
    """Pandolf metabolic power in milliwatts.

    M = 1.5W + 2(W+L)(L/W)^2 + mu(W+L)(1.5V^2 + 0.35VG)

    With ``velocity_correction`` the last term is scaled by
    1.1 × (1 + sqrt(0.3V^2)/7 + (V·L/W/4)^2). Returns 0 when the body
    mass is not positive.
    """
    if mass_kg1000 <= 0:
        return 0
    total = mass_kg1000 + load_kg1000
    ratio_q = tdiv(load_kg1000 * Q6, mass_kg1000)  # scale 1e6
    ratio_sq_q = tdiv(ratio_q * ratio_q, Q6)  # scale 1e6
    term1 = tdiv(mass_kg1000 * 3, 2)
    term2 = tdiv(2 * total * ratio_sq_q, Q6)

    v_q = speed_mmps  # scale 1e3
    v2_q = v_q * v_q  # scale 1e6
    term_a_q = tdiv(v2_q * 3, 2)  # scale 1e6
    grade_q = grade_tenths * 10  # scale 1e4
    term_b_q = tdiv(v_q * grade_q * 35, 100)  # scale 1e7
    term_b_q = tdiv(term_b_q, 10)  # scale 1e6
    inner_q = term_a_q + term_b_q
    term3 = tdiv(total * inner_q * terrain_hundredths, 100 * Q6)

    if velocity_correction:
        sqrt_q = isqrt(tdiv(v2_q * 3, 10))  # sqrt(0.3 V^2), scale 1e3
        sqrt_term_q = tdiv(sqrt_q * 1000, 7)  # scale 1e6
        v_lr_q = tdiv(v_q * ratio_q, Q6)  # scale 1e3
        vl_term_q = tdiv(v_lr_q * v_lr_q, 4)  # scale 1e6
        mult_q = tdiv((Q6 + sqrt_term_q + vl_term_q) * 11, 10)  # scale 1e6
        term3 = tdiv(term3 * mult_q, Q6)

    return term1 + term2 + term3


def pandolf_kcal_per_hour(metabolic_mw: int) -> int:
    """Milliwatts → kcal/hour (4184 J per kcal)."""
    return tdiv(tdiv(metabolic_mw * 3600, 4184), 1000)


# ---------------------------------------------------------------------------
# ACSM unloaded walking model
# ---------------------------------------------------------------------------

def walking_kcal_per_hour(mass_kg1000: int, speed_mmps: int, grade_tenths: int) -> int:
    """ACSM walking estimate in kcal/hour. Carried load is ignored.

    VO2 (ml/kg/min) = 3.5 + 0.1·S + 1.8·S·G with S in m/min,
    kcal/h = VO2 · kg · 60 / 200.
    """
    speed_m_min_q = speed_mmps * 60  # m/min, scale 1e3
    vo2_q = 3500  # scale 1e3
    vo2_q += tdiv(speed_m_min_q, 10)
    vo2_q += tdiv(speed_m_min_q * grade_tenths * 1800, Q6)
    if vo2_q < 0:
        vo2_q = 0
    return tdiv(vo2_q * mass_kg1000 * 3, 10_000_000)


def kcal_over(kcal_per_hour: int, elapsed_s: int) -> int:
    """Calories burned at a constant hourly rate over ``elapsed_s`` seconds."""
    return tdiv(kcal_per_hour * elapsed_s, 3600)
