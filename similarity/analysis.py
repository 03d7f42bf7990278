"""Post-processing of converged similarity profiles.

References:
- Schlichting, *Boundary-Layer Theory*, 7th ed., Ch. 13.
- White, *Viscous Fluid Flow*, 3rd ed., Ch. 7.
"""

import numpy as np

from similarity.gas import chapman_rubesin, recovery_temperature_ratio


_trapz = getattr(np, 'trapezoid', getattr(np, 'trapz', None))


def transform_coordinate(eta, T):
    """Map the similarity coordinate η to the wall-normal coordinate y.

    Forward accumulation of the density-weighted Howarth-Dorodnitsyn
    transform (ρₑ/ρ = T/Tₑ):

        y[0] = 0,  y[i] = y[i-1] + T[i]·(η[i] - η[i-1]),  y ← √2·y

    The result is y/√(νₑx/Uₑ).

    Parameters
    ----------
    eta : ndarray, shape (N+1,)
    T : ndarray, shape (N+1,)
        Scaled temperature T/Tₑ.

    Returns
    -------
    y : ndarray, shape (N+1,)
    """
    eta = np.asarray(eta, dtype=float)
    T = np.asarray(T, dtype=float)
    y = np.zeros_like(eta)
    for i in range(1, len(eta)):
        y[i] = y[i - 1] + T[i] * (eta[i] - eta[i - 1])
    return y * np.sqrt(2)


def _edge_crossing(x, U, level=0.99):
    """First x where U reaches `level`, linearly interpolated; None if never."""
    above = np.nonzero(U >= level)[0]
    if len(above) == 0:
        return None
    i = above[0]
    if i == 0:
        return float(x[0])
    return float(np.interp(level, [U[i - 1], U[i]], [x[i - 1], x[i]]))


def profile_summary(result):
    """Integral and wall quantities of a similarity solution.

    Thicknesses are in the same scaling as `result.y`:
        δ* = ∫(1 - ρu/ρₑuₑ) dy = √2·∫(T - U) dη
        θ  = ∫ρu/ρₑuₑ·(1 - u/uₑ) dy = √2·∫U(1 - U) dη

    Parameters
    ----------
    result : SimilarityResult

    Returns
    -------
    dict with keys:
        wall_shear : float — f''(0)
        wall_temperature : float — T(0)/Tₑ
        edge_velocity : float — U at η_max
        edge_temperature : float — T at η_max
        eta_99 : float or None — η where U = 0.99
        y_99 : float or None — y where U = 0.99
        displacement_thickness : float
        momentum_thickness : float
        shape_factor : float — δ*/θ
        chapman_rubesin_wall : float — ρμ/ρₑμₑ at the wall
        recovery_temperature_ratio : float — laminar T_aw/Tₑ for reference
    """
    params = result.params
    gas = params.gas
    eta, y, U, T = result.eta, result.y, result.U, result.T

    delta_star = float(np.sqrt(2) * _trapz(T - U, eta))
    theta = float(np.sqrt(2) * _trapz(U * (1 - U), eta))

    return {
        'wall_shear': float(result.profile[2, 0]),
        'wall_temperature': float(T[0]),
        'edge_velocity': float(U[-1]),
        'edge_temperature': float(T[-1]),
        'eta_99': _edge_crossing(eta, U),
        'y_99': _edge_crossing(y, U),
        'displacement_thickness': delta_star,
        'momentum_thickness': theta,
        'shape_factor': delta_star / theta if theta > 0 else float('nan'),
        'chapman_rubesin_wall': float(
            chapman_rubesin(T[0], params.t_inf, gas.sutherland_c)),
        'recovery_temperature_ratio': float(recovery_temperature_ratio(
            params.mach, gas.gamma, gas.prandtl)),
    }
