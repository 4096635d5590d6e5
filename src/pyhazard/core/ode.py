"""
Fixed-step Runge-Kutta integration.

The integrator is independent of the ecological model: any callable
``f(t, y, *args) -> dy/dt`` can be advanced.
"""

from __future__ import annotations

from typing import Callable, Tuple

import numpy as np

VectorField = Callable[..., np.ndarray]

# Remainders shorter than this fraction of dt are merged into the last step
_SNAP = 1e-9


def rk4_step(
    f: VectorField,
    t: float,
    y: np.ndarray,
    dt: float,
    args: tuple = (),
) -> np.ndarray:
    """
    Classical 4th order Runge-Kutta step.

    Parameters
    ----------
    f : callable
        Vector field ``f(t, y, *args)``
    t : float
        Current time
    y : np.ndarray
        Current state vector
    dt : float
        Step size (> 0)
    args : tuple
        Extra arguments passed to ``f``

    Returns
    -------
    np.ndarray
        State at ``t + dt``
    """
    if dt <= 0:
        raise ValueError(f"dt must be > 0, got {dt}")

    y = np.asarray(y, dtype=float)
    half = 0.5 * dt

    k1 = f(t, y, *args)
    k2 = f(t + half, y + half * k1, *args)
    k3 = f(t + half, y + half * k2, *args)
    k4 = f(t + dt, y + dt * k3, *args)

    return y + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)


def solve_ode(
    f: VectorField,
    y0: np.ndarray,
    t0: float,
    t1: float,
    dt: float,
    args: tuple = (),
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Integrate from ``t0`` to ``t1`` with fixed steps of ``dt``.

    The last step is shortened so the final sample lands exactly on ``t1``.

    Parameters
    ----------
    f : callable
        Vector field ``f(t, y, *args)``
    y0 : np.ndarray
        Initial state
    t0, t1 : float
        Start and end times. If ``t1 <= t0`` only the initial sample is
        returned.
    dt : float
        Maximum step size (> 0)
    args : tuple
        Extra arguments passed to ``f``

    Returns
    -------
    times : np.ndarray
        Sample times [n_samples], first ``t0``, last ``t1``
    states : np.ndarray
        States [n_samples, n_state]
    """
    if dt <= 0:
        raise ValueError(f"dt must be > 0, got {dt}")

    y = np.array(y0, dtype=float)
    times = [float(t0)]
    states = [y.copy()]

    t = float(t0)
    k = 0
    while t < t1:
        k += 1
        # Grid times are t0 + k*dt so rounding does not accumulate
        t_next = t0 + k * dt
        if t_next >= t1 or t1 - t_next < _SNAP * dt:
            t_next = float(t1)
        y = rk4_step(f, t, y, t_next - t, args)
        t = t_next
        times.append(t)
        states.append(y.copy())

    return np.array(times), np.array(states)
