"""Fixed-step Runge-Kutta-Fehlberg integration of the similarity equations.

Uses the embedded RKF45 tableau with Cash-Karp coefficients (Press et al.,
*Numerical Recipes*, 2nd ed., §16.2), keeping only the 5th-order
combination. There is no error estimate and no step-size control: every
step is exactly Δη.

Decoupled update
----------------
The state is not advanced as one vector. Each component k is advanced with
its own six stage evaluations of dy_k, in which only component k is
perturbed and the other four are held at their pre-step values. The
components are advanced in the order y5, y4, y3, y2, y1, and each one reads
only the pre-step state, never a value already updated in the same step.
This splitting defines the numerical solution and must not be replaced by
a coupled vector RK step.
"""

import numpy as np

from similarity.equations import DERIVATIVES, StateVector, check_temperature
from similarity.errors import NonPhysicalStateError


# Stage nodes b_j
B = (0.0, 0.2, 0.3, 0.6, 1.0, 7.0 / 8.0)

# Stage matrix a_jl (row j lists a_j1 .. a_j(j-1))
A = (
    (),
    (0.2,),
    (3.0 / 40.0, 9.0 / 40.0),
    (0.3, -0.9, 6.0 / 5.0),
    (-11.0 / 54.0, 2.5, -70.0 / 27.0, 35.0 / 27.0),
    (1631.0 / 55296.0, 175.0 / 512.0, 575.0 / 13824.0,
     44275.0 / 110592.0, 253.0 / 4096.0),
)

# 5th-order weights (c2 = c5 = 0)
C = (37.0 / 378.0, 0.0, 250.0 / 621.0, 125.0 / 594.0, 0.0, 512.0 / 1771.0)

# Components are advanced in this order within a step
UPDATE_ORDER = (4, 3, 2, 1, 0)


def component_increment(k, eta, state, d_eta, params):
    """Six-stage RKF increment of component k with the others frozen.

    Parameters
    ----------
    k : int
        State component (0..4 for y1..y5).
    eta : float
        Similarity coordinate at the start of the step.
    state : sequence of 5 floats
        Pre-step state.
    d_eta : float
        Step size.
    params : SimilarityParameters

    Returns
    -------
    float
        Δη · Σ c_j w_j, to be added to state[k].
    """
    deriv = DERIVATIVES[k]
    stage = list(state)
    w = []
    for b, a_row in zip(B, A):
        stage[k] = state[k] + d_eta * sum(a * wl for a, wl in zip(a_row, w))
        w.append(deriv(eta + d_eta * b, stage, params))
    return d_eta * sum(c * wj for c, wj in zip(C, w))


def step(eta, state, d_eta, params):
    """Advance one grid step with the decoupled component update.

    Returns the new state as a StateVector.
    """
    new = list(state)
    for k in UPDATE_ORDER:
        new[k] = state[k] + component_increment(k, eta, state, d_eta, params)
    return StateVector(*new)


def integrate(grid, params, alpha, beta):
    """Integrate from the wall across the whole grid.

    Wall values are f(0) = f'(0) = T'(0) = 0, f''(0) = alpha, T(0) = beta.

    Parameters
    ----------
    grid : ndarray, shape (N+1,)
        Uniform similarity-coordinate grid starting at 0.
    params : SimilarityParameters
    alpha, beta : float
        Guessed f''(0) and T(0).

    Returns
    -------
    profile : ndarray, shape (5, N+1)
        Rows y1..y5 at every grid point. A fresh array on every call.

    Raises
    ------
    NonPhysicalStateError
        If T/Tₑ becomes non-positive at any grid point, the last one
        included; carries the η and grid index.
    """
    n_points = len(grid)
    profile = np.zeros((5, n_points))
    state = StateVector(0.0, 0.0, float(alpha), float(beta), 0.0)
    profile[:, 0] = state
    if n_points < 2:
        return profile

    # grid[i] == i * d_eta on a uniform grid
    d_eta = float(grid[1] - grid[0])
    for i in range(n_points - 1):
        try:
            state = step(float(grid[i]), state, d_eta, params)
        except NonPhysicalStateError as exc:
            raise exc.locate(eta=float(grid[i]), index=i) from None
        try:
            check_temperature(state.T)
        except NonPhysicalStateError as exc:
            raise exc.locate(eta=float(grid[i + 1]), index=i + 1) from None
        profile[:, i + 1] = state

    return profile
