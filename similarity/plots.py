"""Visualization of similarity profiles.

All plot functions return (fig, ax) tuples for composability.
"""

import matplotlib.pyplot as plt


def _profile_axes(ax, figsize=(5, 5)):
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)
    else:
        fig = ax.figure
    return fig, ax


def plot_profile(values, coordinate, xlabel, ylabel, label=None, ax=None,
                 title="Similarity Profile"):
    """Plot one profile with the wall-normal coordinate on the vertical axis.

    Parameters
    ----------
    values : ndarray
        Profile values (U or T).
    coordinate : ndarray
        η or y, same length as values.
    xlabel, ylabel : str
    label : str or None
        Legend label.
    ax : matplotlib Axes or None
        Existing axes to plot on.
    title : str

    Returns
    -------
    fig, ax
    """
    fig, ax = _profile_axes(ax)
    ax.plot(values, coordinate, 'k-', linewidth=2, marker='o',
            markerfacecolor='r', markeredgecolor='r', markersize=4,
            label=label)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    if label:
        ax.legend(loc='upper left')
    fig.tight_layout()
    return fig, ax


def plot_similarity_profiles(result, title=None):
    """The three standard views: U(η), T(η) and U(y).

    Parameters
    ----------
    result : SimilarityResult
    title : str or None
        Figure title; defaults to the Mach number and edge temperature.

    Returns
    -------
    fig, axes
    """
    params = result.params
    if title is None:
        title = f"Similarity (M={params.mach:g} - T={params.t_inf:g}K)"

    fig, axes = plt.subplots(1, 3, figsize=(14, 5))
    plot_profile(result.U, result.eta, "U", "η", label="U", ax=axes[0],
                 title="Velocity")
    plot_profile(result.T, result.eta, "T", "η", label="T", ax=axes[1],
                 title="Temperature")
    plot_profile(result.U, result.y, "U", "y/√(νx/U)", label="U", ax=axes[2],
                 title="Velocity (physical coordinate)")

    fig.suptitle(title)
    fig.tight_layout()
    return fig, axes


def plot_convergence(history, ax=None, title="Shooting Convergence"):
    """Semilog history of the profile change and boundary residual.

    Parameters
    ----------
    history : list of (iteration, error_profile, error_bc)
    ax : Axes or None

    Returns
    -------
    fig, ax
    """
    fig, ax = _profile_axes(ax, figsize=(7, 4))
    if history:
        its, err_profile, err_bc = zip(*history)
        ax.semilogy(its, err_profile, 'b-o', markersize=3, label="profile change")
        ax.semilogy(its, err_bc, 'r-s', markersize=3, label="|f'(η_max) - 1|")
        ax.legend()
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Error")
    ax.set_title(title)
    ax.grid(True, which='both', alpha=0.3)
    fig.tight_layout()
    return fig, ax
