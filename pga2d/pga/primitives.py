"""
Geometric primitives in 2-D Projective Geometric Algebra.

PGA represents geometric objects as follows:
- Lines: Grade-1 vectors. The line ax + by + c = 0 is a*e1 + b*e2 + c*e0
- Points: Grade-2 bivectors. The point (x, y) is y*e01 - x*e02 + e12
- Directions: Ideal points, bivectors with e12 = 0

The point encoding is chosen so that the outer product of a line and a
point, the e012 part of L * P, is ax + by + c: zero exactly when the point
lies on the line.

Every factory takes optional dtype and device keywords, so the output of
Config.tensor_kwargs() can be passed straight through.
"""

from __future__ import annotations
from functools import reduce
from typing import Optional, Tuple, Union
import torch

from ..core.constants import DEFAULT_DTYPE, DEFAULT_EPS
from ..core.types import ValueLike
from .algebra import (
    GenericMultiVector,
    Scalar, Vector, BiVector, TriVector,
    shape_class,
)
from .shape import Shape

Device = Optional[Union[str, torch.device]]


# === Factory functions for basis elements ===

def scalar(
    s: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Device = None,
) -> Scalar:
    """Create a scalar."""
    return Scalar(s, dtype=dtype, device=device)


def _basis(name: str, coeff: ValueLike, dtype, device) -> GenericMultiVector:
    """Create a single-slot multivector."""
    return shape_class(Shape.of(name))(**{name: coeff}, dtype=dtype, device=device)


def e0(coeff: ValueLike = 1.0, dtype: Optional[torch.dtype] = None, device: Device = None) -> GenericMultiVector:
    """Create e₀ basis element (degenerate direction, the line at infinity)."""
    return _basis("e0", coeff, dtype, device)


def e1(coeff: ValueLike = 1.0, dtype: Optional[torch.dtype] = None, device: Device = None) -> GenericMultiVector:
    """Create e₁ basis element (the line x = 0)."""
    return _basis("e1", coeff, dtype, device)


def e2(coeff: ValueLike = 1.0, dtype: Optional[torch.dtype] = None, device: Device = None) -> GenericMultiVector:
    """Create e₂ basis element (the line y = 0)."""
    return _basis("e2", coeff, dtype, device)


def e01(coeff: ValueLike = 1.0, dtype: Optional[torch.dtype] = None, device: Device = None) -> GenericMultiVector:
    return _basis("e01", coeff, dtype, device)


def e02(coeff: ValueLike = 1.0, dtype: Optional[torch.dtype] = None, device: Device = None) -> GenericMultiVector:
    return _basis("e02", coeff, dtype, device)


def e12(coeff: ValueLike = 1.0, dtype: Optional[torch.dtype] = None, device: Device = None) -> GenericMultiVector:
    """Create e₁₂ basis bivector (the origin)."""
    return _basis("e12", coeff, dtype, device)


def e012(coeff: ValueLike = 1.0, dtype: Optional[torch.dtype] = None, device: Device = None) -> TriVector:
    """Create e₀₁₂, the pseudoscalar."""
    return TriVector(coeff, dtype=dtype, device=device)


# === Points, directions and lines ===

def _coords(
    x: ValueLike,
    y: ValueLike,
    dtype: Optional[torch.dtype],
    device: Device,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Broadcast a coordinate pair to tensors of one dtype and device.

    Without an explicit dtype, floating point tensor inputs are promoted
    together and plain numbers are created directly in the result dtype.
    """
    tensors = [v for v in (x, y) if isinstance(v, torch.Tensor)]
    if dtype is None:
        floats = [t.dtype for t in tensors if t.is_floating_point()]
        dtype = reduce(torch.promote_types, floats) if floats else DEFAULT_DTYPE
    if device is None and tensors:
        device = tensors[0].device
    x = torch.as_tensor(x, dtype=dtype, device=device)
    y = torch.as_tensor(y, dtype=dtype, device=device)
    return torch.broadcast_tensors(x, y)


def point(
    x: ValueLike,
    y: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Device = None,
) -> BiVector:
    """
    Create a normalized point from Cartesian coordinates.

        P = y*e01 - x*e02 + e12

    Args:
        x, y: Cartesian coordinates (numbers or tensors)
        dtype: Value dtype; defaults to the promoted dtype of tensor inputs
        device: Value device

    Returns:
        Point (grade-2 bivector)
    """
    x, y = _coords(x, y, dtype, device)
    return BiVector(e01=y, e02=-x, e12=torch.ones_like(x))


def direction(
    x: ValueLike,
    y: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Device = None,
) -> BiVector:
    """Create an ideal point (direction): a point with zero weight."""
    x, y = _coords(x, y, dtype, device)
    return BiVector(e01=y, e02=-x, e12=torch.zeros_like(x))


def origin(dtype: Optional[torch.dtype] = None, device: Device = None) -> BiVector:
    return point(0.0, 0.0, dtype=dtype, device=device)


def point_to_cartesian(p: GenericMultiVector, eps: float = DEFAULT_EPS) -> torch.Tensor:
    """
    Extract Cartesian coordinates from a point.

    Args:
        p: Point multivector (any shape holding the grade-2 slots)
        eps: Lower bound on |weight| to avoid division by zero

    Returns:
        Tensor of shape (..., 2) containing [x, y]
    """
    w = p.e12
    # Ideal points have no finite position
    w = torch.where(w.abs() < eps, torch.full_like(w, eps).copysign(w), w)
    x = -p.e02 / w
    y = p.e01 / w
    return torch.stack([x, y], dim=-1)


def line(
    a: ValueLike,
    b: ValueLike,
    c: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Device = None,
) -> Vector:
    """
    Create the line ax + by + c = 0.

    Returns:
        Line (grade-1 vector) a*e1 + b*e2 + c*e0
    """
    return Vector(e0=c, e1=a, e2=b, dtype=dtype, device=device)


def incidence(l: GenericMultiVector, p: GenericMultiVector) -> torch.Tensor:
    """
    Signed incidence of a point on a line: the e012 part of l * p.

    Equals ax + by + c for a normalized point, so zero means on the line.
    """
    return (l.grade(1) * p.grade(2)).e012


def is_ideal(p: GenericMultiVector, eps: float = DEFAULT_EPS) -> Union[bool, torch.Tensor]:
    """True where a point has (numerically) zero weight."""
    result = p.e12.abs() < eps
    return bool(result) if result.dim() == 0 else result

