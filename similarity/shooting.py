"""Shooting-method driver for the compressible similarity BVP.

The two unknown wall values α = f''(0) and β = T(0) are corrected by a
Newton iteration until the far-field conditions f'(η_max) = 1 and
T(η_max) = 1 hold. Each outer iteration integrates the grid three times
(baseline, α+Δ, β+Δ) to build a finite-difference Jacobian, then solves
the 2×2 Newton system by Cramer's rule.

Termination is gated on the change of the velocity profile only. The
boundary-condition residual is reported alongside but never ends the loop.

References:
    Schlichting, *Boundary-Layer Theory*, 7th ed., Ch. 13.
    Press et al., *Numerical Recipes*, 2nd ed., §17.1 (shooting).
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from loguru import logger

from similarity.analysis import transform_coordinate
from similarity.equations import SimilarityParameters
from similarity.errors import NonPhysicalStateError, SingularJacobianError
from similarity.fehlberg import integrate


# |det| below this makes the Newton step meaningless
SINGULAR_DET_TOL = 1e-14

PASS_NAMES = ('baseline', 'perturb-alpha', 'perturb-beta')


class ShootingStatus(Enum):
    CONVERGED = 'converged'
    ITERATION_LIMIT = 'iteration_limit'


@dataclass
class SimilarityResult:
    """Outcome of a shooting solve.

    Attributes
    ----------
    params : SimilarityParameters
    eta : ndarray, shape (N+1,)
        Similarity coordinate.
    y : ndarray, shape (N+1,)
        Transformed wall-normal coordinate y/√(νₑx/Uₑ).
    profile : ndarray, shape (5, N+1)
        Rows f, f', f'', T, T' of the last baseline integration.
    alpha, beta : float
        Wall values f''(0), T(0) that produced `profile`.
    next_alpha, next_beta : float
        Guess after the last Newton update (equal to alpha, beta when no
        iteration ran).
    iterations : int
        Number of completed outer iterations.
    status : ShootingStatus
    error_profile : float
        |‖f'‖ - ‖f'_prev‖| of the last iteration.
    error_bc : float
        |f'(η_max) - 1| of the last baseline integration.
    history : list of (iteration, error_profile, error_bc)
    """
    params: SimilarityParameters
    eta: np.ndarray
    y: np.ndarray
    profile: np.ndarray
    alpha: float
    beta: float
    next_alpha: float
    next_beta: float
    iterations: int
    status: ShootingStatus
    error_profile: float
    error_bc: float
    history: list = field(default_factory=list)

    @property
    def U(self):
        """Velocity profile u/uₑ = f'."""
        return self.profile[1]

    @property
    def T(self):
        """Temperature profile T/Tₑ."""
        return self.profile[3]

    @property
    def n(self):
        return self.params.n

    @property
    def profile_converged(self):
        return self.error_profile <= self.params.eps_profile

    @property
    def bc_converged(self):
        return self.error_bc <= self.params.eps_bc

    def as_tuple(self):
        """(η, y, U, T, N)."""
        return self.eta, self.y, self.U, self.T, self.n


def newton_update(far, far_alpha, far_beta, delta, iteration=None):
    """Newton correction (Δα, Δβ) from three far-field evaluations.

    Parameters
    ----------
    far : (float, float)
        (f'(η_max), T(η_max)) of the baseline pass.
    far_alpha, far_beta : (float, float)
        Same for the α+Δ and β+Δ passes.
    delta : float
        Finite-difference perturbation Δ.
    iteration : int or None
        Reported in SingularJacobianError.

    Returns
    -------
    (d_alpha, d_beta)

    Raises
    ------
    SingularJacobianError
        If the determinant of the Jacobian is numerically zero.
    """
    u0, t0 = far
    p11 = (far_alpha[0] - u0) / delta
    p21 = (far_alpha[1] - t0) / delta
    p12 = (far_beta[0] - u0) / delta
    p22 = (far_beta[1] - t0) / delta
    r1 = 1 - u0
    r2 = 1 - t0

    det = p11 * p22 - p12 * p21
    if not np.isfinite(det) or abs(det) < SINGULAR_DET_TOL:
        raise SingularJacobianError(float(det), iteration)

    d_alpha = (p22 * r1 - p12 * r2) / det
    d_beta = (p11 * r2 - p21 * r1) / det
    return d_alpha, d_beta


def _far_field(profile):
    return profile[1, -1], profile[3, -1]


def _run_pass(grid, params, alpha, beta, iteration, pass_name):
    try:
        return integrate(grid, params, alpha, beta)
    except NonPhysicalStateError as exc:
        raise exc.locate(iteration=iteration, pass_name=pass_name) from None


def shoot(params=None):
    """Solve the similarity BVP by shooting on (f''(0), T(0)).

    Parameters
    ----------
    params : SimilarityParameters or None
        Defaults to SimilarityParameters().

    Returns
    -------
    SimilarityResult
        Status CONVERGED when the profile change fell to eps_profile,
        ITERATION_LIMIT otherwise. The last profile is returned either way.

    Raises
    ------
    NonPhysicalStateError
        T/Tₑ became non-positive during any integration pass.
    SingularJacobianError
        The shooting Jacobian could not be inverted.
    """
    if params is None:
        params = SimilarityParameters()

    grid = params.grid
    delta = params.delta
    alpha, beta = params.alpha0, params.beta0
    used_alpha, used_beta = alpha, beta

    iteration = 0
    error_profile = 1.0
    error_bc = 1.0
    norm_old = 0.0
    profile = None
    history = []

    while params.eps_profile <= error_profile and iteration < params.itermax:
        current = iteration + 1
        used_alpha, used_beta = alpha, beta

        profile = _run_pass(grid, params, alpha, beta, current, PASS_NAMES[0])
        perturbed_alpha = _run_pass(grid, params, alpha + delta, beta,
                                    current, PASS_NAMES[1])
        perturbed_beta = _run_pass(grid, params, alpha, beta + delta,
                                   current, PASS_NAMES[2])

        d_alpha, d_beta = newton_update(
            _far_field(profile), _far_field(perturbed_alpha),
            _far_field(perturbed_beta), delta, iteration=current,
        )
        alpha += d_alpha
        beta += d_beta

        norm_new = np.linalg.norm(profile[1])
        error_profile = float(abs(norm_new - norm_old))
        error_bc = float(abs(profile[1, -1] - 1.0))
        norm_old = norm_new
        iteration = current

        history.append((iteration, error_profile, error_bc))
        logger.info(f"{iteration:04d} {error_profile:16.6e} {error_bc:16.6e}")

    if profile is None:
        # No iteration ran: report the initial-guess integration as is
        profile = _run_pass(grid, params, alpha, beta, 0, PASS_NAMES[0])
        error_bc = float(abs(profile[1, -1] - 1.0))

    if error_profile <= params.eps_profile:
        status = ShootingStatus.CONVERGED
        logger.success(
            f"Solution converged: the change between consecutive profiles "
            f"is below eps_profile={params.eps_profile:g}.")
    else:
        status = ShootingStatus.ITERATION_LIMIT
        logger.warning(
            f"Iteration limit {params.itermax} reached with profile change "
            f"{error_profile:.6e} > eps_profile={params.eps_profile:g}.")

    if error_bc <= params.eps_bc:
        logger.success(
            f"Boundary condition converged: |f'(eta_max) - 1| is below "
            f"eps_bc={params.eps_bc:g}.")

    eta = grid
    T = profile[3]
    return SimilarityResult(
        params=params,
        eta=eta,
        y=transform_coordinate(eta, T),
        profile=profile,
        alpha=used_alpha,
        beta=used_beta,
        next_alpha=alpha,
        next_beta=beta,
        iterations=iteration,
        status=status,
        error_profile=error_profile,
        error_bc=error_bc,
        history=history,
    )


def solve(mach=1.0, t_inf=300.0, eta_max=10.0, n=50, itermax=40,
          eps_profile=1e-6, eps_bc=1e-6):
    """Compressible similarity solution with the default shooting setup.

        eta, y, U, T, N = solve()

    Parameters
    ----------
    mach : float
        Freestream Mach number.
    t_inf : float
        Freestream temperature [K].
    eta_max : float
        Outer edge of the similarity coordinate.
    n : int
        Number of grid segments.
    itermax : int
        Maximum outer iterations.
    eps_profile, eps_bc : float
        Profile-change and boundary-condition tolerances.

    Returns
    -------
    eta, y, U, T : ndarray, shape (N+1,)
    N : int
    """
    params = SimilarityParameters(
        mach=mach, t_inf=t_inf, eta_max=eta_max, n=n, itermax=itermax,
        eps_profile=eps_profile, eps_bc=eps_bc,
    )
    return shoot(params).as_tuple()
