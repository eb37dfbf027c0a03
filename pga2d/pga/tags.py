"""
Component tags for multivector slots.

Every slot of a multivector is tagged with exactly one of two kinds:

- Absent: statically zero. Carries no storage and reads as 0.0.
- Real: carries one floating point value (a torch tensor).

The domain is closed. Both classes are final and Absent is a singleton, so
`isinstance(tag, Real)` is an exhaustive test once a value is known to be a
tag. Arithmetic on tags decides both the output tag and the computation:

    Operation   Absent,Absent   Absent,Real   Real,Absent   Real,Real
    negate      Absent          -             -             Real(-v)
    add         Absent          Real(rhs)     Real(lhs)     Real(lhs+rhs)
    subtract    Absent          Real(-rhs)    Real(lhs)     Real(lhs-rhs)
    multiply    Absent          Absent        Absent        Real(lhs*rhs)
"""

from __future__ import annotations
from typing import Optional, Union, final
import torch

from ..core.constants import DEFAULT_DTYPE
from ..core.types import ValueLike


def as_value(
    value: ValueLike,
    dtype: Optional[torch.dtype] = None,
    device: Optional[Union[str, torch.device]] = None,
) -> torch.Tensor:
    """
    Convert a slot value to a floating point tensor.

    Floating point tensors keep their dtype unless one is requested.
    Everything else becomes DEFAULT_DTYPE.
    """
    if isinstance(value, torch.Tensor):
        if dtype is None and not value.is_floating_point():
            dtype = DEFAULT_DTYPE
        if dtype is None and device is None:
            return value
        return value.to(dtype=dtype or value.dtype, device=device or value.device)
    return torch.tensor(float(value), dtype=dtype or DEFAULT_DTYPE, device=device)


@final
class Absent:
    """Statically zero slot. There is exactly one instance, ABSENT."""

    __slots__ = ()
    _instance: Optional["Absent"] = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (Absent, ())

    def __copy__(self) -> "Absent":
        return self

    def __deepcopy__(self, memo) -> "Absent":
        return self

    def __bool__(self) -> bool:
        return False

    def __neg__(self) -> "Absent":
        return self

    def __add__(self, other: Tag) -> Tag:
        return add_tag(self, other)

    def __sub__(self, other: Tag) -> Tag:
        return sub_tag(self, other)

    def __mul__(self, other: Tag) -> Tag:
        return mul_tag(self, other)

    def __float__(self) -> float:
        return 0.0


ABSENT = Absent()


@final
class Real:
    """Slot holding one value."""

    __slots__ = ("value",)

    def __init__(self, value: ValueLike):
        object.__setattr__(self, "value", as_value(value))

    def __setattr__(self, name, value):
        raise AttributeError("Real tags are immutable")

    def __repr__(self) -> str:
        if self.value.dim() == 0:
            return f"Real({self.value.item()!r})"
        return f"Real(shape={tuple(self.value.shape)})"

    def __reduce__(self):
        return (Real, (self.value,))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Real):
            return NotImplemented
        return torch.equal(self.value, other.value)

    __hash__ = None

    def __neg__(self) -> "Real":
        return negate_tag(self)

    def __add__(self, other: Tag) -> "Real":
        return add_tag(self, other)

    def __sub__(self, other: Tag) -> "Real":
        return sub_tag(self, other)

    def __mul__(self, other: Tag) -> Tag:
        return mul_tag(self, other)

    def __float__(self) -> float:
        return float(self.value)


Tag = Union[Absent, Real]


def is_tag(obj) -> bool:
    """True for ABSENT and Real instances only."""
    return obj is ABSENT or isinstance(obj, Real)


def _check(*tags) -> None:
    for tag in tags:
        if not is_tag(tag):
            raise TypeError(f"Expected a component tag, got {type(tag).__name__}")


def negate_tag(tag: Tag) -> Tag:
    """Absent -> Absent, Real(v) -> Real(-v)."""
    _check(tag)
    if tag is ABSENT:
        return ABSENT
    return Real(-tag.value)


def add_tag(lhs: Tag, rhs: Tag) -> Tag:
    """Sum of two tags; Absent only when both sides are Absent."""
    _check(lhs, rhs)
    if lhs is ABSENT:
        return rhs
    if rhs is ABSENT:
        return lhs
    return Real(lhs.value + rhs.value)


def sub_tag(lhs: Tag, rhs: Tag) -> Tag:
    """Difference of two tags; Absent only when both sides are Absent."""
    _check(lhs, rhs)
    if rhs is ABSENT:
        return lhs
    if lhs is ABSENT:
        return Real(-rhs.value)
    return Real(lhs.value - rhs.value)


def mul_tag(lhs: Tag, rhs: Tag) -> Tag:
    """Product of two tags; Absent if either side is Absent."""
    _check(lhs, rhs)
    if lhs is ABSENT or rhs is ABSENT:
        return ABSENT
    return Real(lhs.value * rhs.value)


def tag_value(tag: Tag) -> Optional[torch.Tensor]:
    """Stored tensor of a Real tag, None for Absent."""
    _check(tag)
    return None if tag is ABSENT else tag.value
