"""Compressible similarity equations in first-order form.

The momentum and energy equations of the compressible laminar flat-plate
boundary layer (Schlichting, *Boundary-Layer Theory*, 7th ed., Ch. 13)

    (C f'')' + f f'' = 0
    (C/Pr · T')' + f T' + (γ-1) M² C f''² = 0

with C = ρμ/(ρₑμₑ) from Sutherland's law, are written as five first-order
equations in the state

    y1 = f,  y2 = f',  y3 = f'',  y4 = T/Tₑ,  y5 = (T/Tₑ)'

Each derivative is a pure function of (η, state, params).
"""

from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from similarity.errors import NonPhysicalStateError
from similarity.gas import GasConstants


class StateVector(NamedTuple):
    """State at one grid point: (f, f', f'', T, T')."""
    f: float
    fp: float
    fpp: float
    T: float
    Tp: float


@dataclass(frozen=True)
class SimilarityParameters:
    """Inputs of one similarity solve.

    Attributes
    ----------
    mach : float
        Freestream Mach number M∞.
    t_inf : float
        Freestream temperature T∞ [K].
    eta_max : float
        Outer bound of the similarity coordinate.
    n : int
        Number of grid segments.
    itermax : int
        Maximum number of outer shooting iterations.
    eps_profile : float
        Tolerance on the change of ‖f'‖ between iterations.
    eps_bc : float
        Tolerance on |f'(η_max) - 1|.
    alpha0, beta0 : float
        Initial guesses for f''(0) and T(0).
    delta : float
        Finite-difference perturbation for the shooting Jacobian.
        Decrease it together with the tolerances.
    gas : GasConstants
        γ, Sutherland constant and Prandtl number.
    """
    mach: float = 1.0
    t_inf: float = 300.0
    eta_max: float = 10.0
    n: int = 50
    itermax: int = 40
    eps_profile: float = 1e-6
    eps_bc: float = 1e-6
    alpha0: float = 0.1
    beta0: float = 3.0
    delta: float = 1e-7
    gas: GasConstants = field(default_factory=GasConstants)

    def __post_init__(self):
        if int(self.n) != self.n or self.n < 1:
            raise ValueError(f"n must be an integer >= 1, got {self.n}")
        if self.eta_max <= 0:
            raise ValueError(f"eta_max must be positive, got {self.eta_max}")
        if int(self.itermax) != self.itermax or self.itermax < 0:
            raise ValueError(
                f"itermax must be a non-negative integer, got {self.itermax}")
        if self.t_inf <= 0:
            raise ValueError(f"t_inf must be positive, got {self.t_inf}")
        if self.mach < 0:
            raise ValueError(f"mach must be non-negative, got {self.mach}")
        for name in ('eps_profile', 'eps_bc', 'delta'):
            if getattr(self, name) <= 0:
                raise ValueError(
                    f"{name} must be positive, got {getattr(self, name)}")

    @property
    def d_eta(self):
        """Uniform grid spacing Δη = η_max / N."""
        return self.eta_max / self.n

    @property
    def grid(self):
        """η[i] = i·Δη for i = 0..N."""
        return np.arange(self.n + 1) * self.d_eta

    @property
    def sutherland_ratio(self):
        """cμ/T∞, the Sutherland constant scaled by the edge temperature."""
        return self.gas.sutherland_c / self.t_inf


def check_temperature(y4):
    """Raise NonPhysicalStateError unless y4 = T/Tₑ is finite and positive."""
    # sqrt(y4) and y5/(2·y4) are undefined for y4 <= 0
    if not (np.isfinite(y4) and y4 > 0):
        raise NonPhysicalStateError(y4)


def dy1(eta, s, params):
    """f' = y2."""
    return s[1]


def dy2(eta, s, params):
    """f'' = y3."""
    return s[2]


def dy3(eta, s, params):
    """Momentum equation solved for f'''."""
    y1, y2, y3, y4, y5 = s
    check_temperature(y4)
    cs = params.sutherland_ratio
    return (-y3 * (y5 / (2 * y4) - y5 / (y4 + cs))
            - y1 * y3 * ((y4 + cs) / (np.sqrt(y4) * (1 + cs))))


def dy4(eta, s, params):
    """T' = y5."""
    return s[4]


def dy5(eta, s, params):
    """Energy equation solved for T''."""
    y1, y2, y3, y4, y5 = s
    check_temperature(y4)
    cs = params.sutherland_ratio
    gas = params.gas
    return (-y5**2 * (0.5 / y4 - 1 / (y4 + cs))
            - gas.prandtl * y1 * y5 / np.sqrt(y4) * (y4 + cs) / (1 + cs)
            - (gas.gamma - 1) * gas.prandtl * params.mach**2 * y3**2)


# Indexed by state component
DERIVATIVES = (dy1, dy2, dy3, dy4, dy5)
