"""Gas properties for the compressible similarity solution.

Calorically perfect air with Sutherland viscosity. Every relation cites
its published source:
- Anderson, *Modern Compressible Flow* (MCF), 3rd ed., 2003
- Schlichting, *Boundary-Layer Theory*, 7th ed., 1979
- White, *Viscous Fluid Flow*, 3rd ed., 2006
"""

from dataclasses import dataclass

import numpy as np


GAMMA = 1.4            # ratio of specific heats
SUTHERLAND_C = 110.4   # Sutherland constant for air [K]
PRANDTL = 0.72         # Prandtl number


@dataclass(frozen=True)
class GasConstants:
    """Fixed physical constants of the similarity equations.

    Attributes
    ----------
    gamma : float
        Ratio of specific heats γ.
    sutherland_c : float
        Sutherland constant cμ [K].
    prandtl : float
        Prandtl number Pr.
    """
    gamma: float = GAMMA
    sutherland_c: float = SUTHERLAND_C
    prandtl: float = PRANDTL

    def __post_init__(self):
        if self.gamma <= 1.0:
            raise ValueError(f"gamma must be > 1, got {self.gamma}")
        if self.sutherland_c < 0:
            raise ValueError(
                f"sutherland_c must be non-negative, got {self.sutherland_c}")
        if self.prandtl <= 0:
            raise ValueError(f"prandtl must be positive, got {self.prandtl}")


# ---------------------------------------------------------------------------
# Sutherland viscosity (White Eq. 1-36; Schlichting Eq. 13.3)
# ---------------------------------------------------------------------------

def sutherland_viscosity_ratio(T, T_ref, S=SUTHERLAND_C):
    """μ/μ_ref = (T/T_ref)^(3/2) · (T_ref + S)/(T + S).

    White Eq. 1-36. The leading coefficient of μ = c₁·T^(3/2)/(T + S)
    cancels in the ratio.
    """
    return (T / T_ref) ** 1.5 * (T_ref + S) / (T + S)


def chapman_rubesin(theta, T_inf, S=SUTHERLAND_C):
    """Chapman-Rubesin parameter C = ρμ/(ρₑμₑ) at scaled temperature θ = T/Tₑ.

    With ρ ∝ 1/T (constant pressure across the layer) and Sutherland's law:
        C = √θ · (1 + S/Tₑ) / (θ + S/Tₑ)

    Schlichting Ch. 13.
    """
    s = S / T_inf
    return np.sqrt(theta) * (1 + s) / (theta + s)


# ---------------------------------------------------------------------------
# Stagnation and recovery temperature (Anderson MCF Ch. 3; White Ch. 7)
# ---------------------------------------------------------------------------

def temperature_ratio(M, gamma=GAMMA):
    """T/T0 = (1 + (γ-1)/2 · M²)^(-1).

    Anderson MCF Eq. 3.28; NACA 1135 Eq. 43.
    """
    return (1 + (gamma - 1) / 2 * M**2) ** (-1)


def recovery_temperature_ratio(M, gamma=GAMMA, prandtl=PRANDTL):
    """Adiabatic-wall temperature ratio T_aw/Tₑ = 1 + r·(γ-1)/2·M².

    Laminar recovery factor r = √Pr, so T_aw lies between Tₑ (r=0) and
    the stagnation temperature T0 = Tₑ/temperature_ratio(M) (r=1).
    White Eq. 7-47.
    """
    r = np.sqrt(prandtl)
    return 1 + r * (1 / temperature_ratio(M, gamma) - 1)
