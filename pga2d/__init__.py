"""
PGA2D: 2-D Projective Geometric Algebra with static zero elimination

A PyTorch library of multivectors over G(2,0,1) whose slots are tagged
Real or Absent per shape, so sums and products only compute the slots the
operand shapes can reach.

Key Features:
- 8-component multivectors (s, e0, e1, e2, e01, e02, e12, e012)
- Named shapes: Scalar, Vector/Line, BiVector/Point, TriVector, Motor, MultiVector
- Geometric product planned once per pair of shapes
- Lossless widening between shapes
- Points, lines, translators and rotors of the plane

Example:
    >>> from pga2d.pga import Vector, point, translator, transform_point
    >>> v = Vector(0.0, 1.0, 2.0)
    >>> m = v * v                      # Motor: s, e01, e02, e12
    >>> p = transform_point(translator(1.0, 0.0), point(2.0, 3.0))
"""

__version__ = "0.1.0"
__author__ = "PGA2D Contributors"

from . import core
from . import pga
from . import utils

__all__ = [
    "core",
    "pga",
    "utils",
]
