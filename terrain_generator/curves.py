# terrain_generator/curves.py

"""
================================================================================
RESPONSE CURVES
================================================================================
Response curves reshape a value before it is used: the height curve remaps
each noise octave, and the influence curve remaps the blended Mandelbrot mask.

Any `float -> float` callable is accepted by the height pipeline. This module
provides a keyframed curve that can be written to and read from JSON, and the
helper that applies an arbitrary curve to a whole NumPy array.
================================================================================
"""

from typing import Callable, Iterable, Union

import numpy as np

Curve = Callable[[float], float]


class ResponseCurve:
    """
    A piecewise-linear curve through (t, value) keys, sorted by t.
    Inputs outside the key range are clamped to the first/last value.
    Evaluates Python floats and NumPy arrays alike.
    """
    # Safe to call directly on an array; see evaluate_curve.
    vectorized = True

    def __init__(self, keys: Iterable[Iterable[float]]):
        pairs = sorted((float(t), float(v)) for t, v in keys)
        if not pairs:
            raise ValueError("A ResponseCurve needs at least one key.")
        self._times = np.array([t for t, _ in pairs], dtype=np.float64)
        self._values = np.array([v for _, v in pairs], dtype=np.float64)

    @classmethod
    def identity(cls, start: float = 0.0, end: float = 1.0) -> "ResponseCurve":
        return cls([(start, start), (end, end)])

    @classmethod
    def from_keys(cls, keys: Union["ResponseCurve", Iterable[Iterable[float]]]) -> "ResponseCurve":
        if isinstance(keys, ResponseCurve):
            return keys
        return cls(keys)

    def to_keys(self) -> list[list[float]]:
        return [[float(t), float(v)] for t, v in zip(self._times, self._values)]

    def __call__(self, t):
        result = np.interp(t, self._times, self._values)
        if np.ndim(result) == 0:
            return float(result)
        return result

    def __repr__(self) -> str:
        return f"ResponseCurve({self.to_keys()})"


def evaluate_curve(curve: Curve, values: np.ndarray) -> np.ndarray:
    """
    Applies `curve` to every element of `values`. Curves that declare
    themselves vectorized (and NumPy ufuncs) get the whole array in one call;
    anything else is called once per element.
    """
    if isinstance(curve, np.ufunc) or getattr(curve, 'vectorized', False):
        return np.asarray(curve(values), dtype=np.float64)
    return np.vectorize(curve, otypes=[np.float64])(values)


# Noise octaves are in [-1, 1]; the blended Mandelbrot mask is in [0, 1].
DEFAULT_HEIGHT_CURVE = ResponseCurve.identity(-1.0, 1.0)
DEFAULT_INFLUENCE_CURVE = ResponseCurve.identity(0.0, 1.0)
