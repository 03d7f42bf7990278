"""Exceptions raised by the similarity solver.

Both failures abort the solve: once the scaled temperature leaves the
physical range, or the Newton step is undefined, nothing computed after
that point is meaningful.
"""


class SimilarityError(Exception):
    """Base class for solver failures."""


class NonPhysicalStateError(SimilarityError, ValueError):
    """Scaled temperature T/Tₑ became non-positive or non-finite.

    Attributes
    ----------
    temperature : float
        Offending value of y4.
    eta : float or None
        Similarity coordinate where it was detected.
    index : int or None
        Grid index of the step being taken.
    iteration : int or None
        Outer shooting iteration (1-based).
    pass_name : str or None
        'baseline', 'perturb-alpha' or 'perturb-beta'.
    """

    def __init__(self, temperature, eta=None, index=None, iteration=None,
                 pass_name=None):
        self.temperature = temperature
        self.eta = eta
        self.index = index
        self.iteration = iteration
        self.pass_name = pass_name
        super().__init__(self._message())

    def _message(self):
        msg = f"Non-physical scaled temperature T={float(self.temperature):.6g}"
        if self.eta is not None:
            msg += f" at eta={self.eta:.6g}"
        if self.index is not None:
            msg += f" (step {self.index})"
        if self.iteration is not None:
            msg += f" in iteration {self.iteration}"
        if self.pass_name is not None:
            msg += f", {self.pass_name} pass"
        return msg + "; try another initial guess (alpha0, beta0)"

    def locate(self, **where):
        """Return a copy with more location fields filled in."""
        fields = {
            'eta': self.eta, 'index': self.index,
            'iteration': self.iteration, 'pass_name': self.pass_name,
        }
        fields.update({k: v for k, v in where.items() if v is not None})
        return NonPhysicalStateError(self.temperature, **fields)


class SingularJacobianError(SimilarityError, ArithmeticError):
    """The 2×2 shooting Jacobian has a (numerically) zero determinant."""

    def __init__(self, determinant, iteration=None):
        self.determinant = determinant
        self.iteration = iteration
        msg = f"Singular shooting Jacobian (det={float(determinant):.6g})"
        if iteration is not None:
            msg += f" in iteration {iteration}"
        super().__init__(msg)
