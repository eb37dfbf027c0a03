"""
Rigid transformations of the plane.

A motor M (Motor shape: s, e01, e02, e12) moves any element X through the
sandwich product

    X' = M * X * ~M

Translators and rotors are motors; composing two motors is their product.
Grade is preserved, so transform_point/transform_line project the result
back onto the grade of the input.
"""

from __future__ import annotations
import math
from typing import Optional, Union
import torch

from ..core.types import ValueLike
from .algebra import GenericMultiVector, Motor, BiVector, Vector


def sandwich(motor: GenericMultiVector, element: GenericMultiVector) -> GenericMultiVector:
    """
    Compute the sandwich product: M * X * ~M
    """
    return motor * element * motor.reverse()


def identity_motor(
    dtype: Optional[torch.dtype] = None,
    device: Optional[Union[str, torch.device]] = None,
) -> Motor:
    return Motor(s=1.0, dtype=dtype, device=device)


def translator(
    dx: ValueLike,
    dy: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Optional[Union[str, torch.device]] = None,
) -> Motor:
    """
    Motor translating by (dx, dy).

        T = 1 - dx/2 * e01 - dy/2 * e02
    """
    return Motor(s=1.0, e01=-0.5 * dx, e02=-0.5 * dy, dtype=dtype, device=device)


def rotor(
    angle: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Optional[Union[str, torch.device]] = None,
) -> Motor:
    """
    Motor rotating counterclockwise by angle (radians) about the origin.

        R = cos(angle/2) - sin(angle/2) * e12
    """
    half = angle / 2
    if isinstance(angle, torch.Tensor):
        return Motor(s=torch.cos(half), e12=-torch.sin(half), dtype=dtype, device=device)
    return Motor(s=math.cos(half), e12=-math.sin(half), dtype=dtype, device=device)


def rotor_about(
    angle: ValueLike,
    x: ValueLike,
    y: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Optional[Union[str, torch.device]] = None,
) -> GenericMultiVector:
    """Rotation about the point (x, y): translate there, rotate, translate back."""
    kwargs = {"dtype": dtype, "device": device}
    return translator(x, y, **kwargs) * rotor(angle, **kwargs) * translator(-x, -y, **kwargs)


def transform_point(motor: GenericMultiVector, p: GenericMultiVector) -> BiVector:
    """Apply a motor to a point, returning a BiVector."""
    return sandwich(motor, p).grade(2).into(BiVector)


def transform_line(motor: GenericMultiVector, l: GenericMultiVector) -> Vector:
    """Apply a motor to a line, returning a Vector."""
    return sandwich(motor, l).grade(1).into(Vector)


def compose(*motors: GenericMultiVector) -> Union[Motor, GenericMultiVector]:
    """
    Compose motors; the last one is applied first.

    compose(A, B) applied to X equals A applied to (B applied to X).
    """
    result = identity_motor()
    for m in motors:
        result = result * m
    return result
