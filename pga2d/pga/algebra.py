"""
Multivectors of the 2-D Projective Geometric Algebra G(2,0,1).

The algebra has 8 basis elements organized by grade:
- Grade 0 (scalar): 1
- Grade 1 (vectors/lines): e₀, e₁, e₂
- Grade 2 (bivectors/points): e₀₁, e₀₂, e₁₂
- Grade 3 (pseudoscalar): e₀₁₂

The metric signature is (2,0,1):
- e₁² = e₂² = +1 (Euclidean)
- e₀² = 0 (degenerate/null direction)

Component ordering:
[s, e0, e1, e2, e01, e02, e12, e012]
 0   1   2   3   4    5    6    7

Every multivector class fixes a Shape: which slots are Real and which are
Absent (statically zero). Operations combine shapes slot by slot, so adding
two Vectors gives a Vector and multiplying two Vectors gives a Motor, with
no work spent on slots that are Absent on both sides. Named specializations:

    Scalar            s
    Vector / Line     e0, e1, e2
    BiVector / Point  e01, e02, e12
    TriVector         e012
    Motor             s, e01, e02, e12
    MultiVector       all eight

Any other shape gets an anonymous class from shape_class().
"""

from __future__ import annotations
from functools import reduce
from typing import ClassVar, Dict, Optional, Tuple, Type, Union
import logging

import torch

from ..core.constants import (
    SLOT_NAMES, SLOT_GRADES, NUM_SLOTS, NUM_GRADES,
    IDX_S, IDX_E0, IDX_E1, IDX_E2, IDX_E01, IDX_E02, IDX_E12, IDX_E012,
    DEFAULT_DTYPE, DEFAULT_DEVICE, DEFAULT_ATOL,
)
from ..core.errors import ShapeMismatchError
from ..core.types import ValueLike, SlotKey
from .tags import ABSENT, Real, Tag, as_value, negate_tag, add_tag, sub_tag, mul_tag
from .shape import Shape, slot_index
from .cayley import ProductTable, CAYLEY_TABLE, get_product_table

logger = logging.getLogger(__name__)


# Grades flipped by reversion, where (-1)^(k(k-1)/2) = -1
REVERSION_GRADES = (2, 3)

# Shape mask -> class
_SHAPE_CLASSES: Dict[int, Type["GenericMultiVector"]] = {}


class GenericMultiVector:
    """
    Base class of all multivector shapes.

    Instances are immutable value records holding one tag per basis slot.
    Subclasses set SHAPE; use a named specialization or shape_class() to
    get a concrete class.

    Construction takes the Real slots positionally, in slot order, or by
    name. Omitted Real slots are 0.0:

        >>> Vector(1.0, 2.0, 3.0)          # e0, e1, e2
        >>> BiVector(e12=1.0)              # e01 = e02 = 0.0
        >>> MultiVector(s=1.0, e012=2.0)
    """

    SHAPE: ClassVar[Optional[Shape]] = None

    __slots__ = ("_components",)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        shape = cls.__dict__.get("SHAPE")
        if shape is not None:
            _SHAPE_CLASSES.setdefault(shape.mask, cls)

    def __init__(
        self,
        *values: ValueLike,
        dtype: Optional[torch.dtype] = None,
        device: Optional[Union[str, torch.device]] = None,
        **slots: ValueLike,
    ):
        shape = self.SHAPE
        if shape is None:
            raise TypeError(
                "GenericMultiVector has no shape; use a specialization or shape_class()"
            )

        real = shape.names
        if len(values) > len(real):
            raise TypeError(
                f"{type(self).__name__} takes at most {len(real)} positional "
                f"values ({', '.join(real)}), got {len(values)}"
            )
        given = dict(zip(real, values))
        for key, value in slots.items():
            name = SLOT_NAMES[slot_index(key)]
            if name in given:
                raise TypeError(f"{type(self).__name__} got multiple values for slot {name!r}")
            given[name] = value

        absent = [name for name in SLOT_NAMES if name in given and name not in shape]
        if absent:
            raise ShapeMismatchError("values", type(self).__name__, absent)

        components = tuple(
            Real(as_value(given.get(name, 0.0), dtype=dtype, device=device))
            if name in shape else ABSENT
            for name in SLOT_NAMES
        )
        object.__setattr__(self, "_components", components)

    @classmethod
    def _from_components(cls, components: Tuple[Tag, ...]) -> "GenericMultiVector":
        """Wrap tags already known to match cls.SHAPE."""
        obj = object.__new__(cls)
        object.__setattr__(obj, "_components", components)
        return obj

    @classmethod
    def from_tensor(cls, components: torch.Tensor) -> "GenericMultiVector":
        """
        Build from a dense tensor of shape (..., 8) in slot order.

        Columns for slots this class holds as Absent must be exactly zero.
        """
        if cls.SHAPE is None:
            return MultiVector.from_tensor(components)
        if components.shape[-1] != NUM_SLOTS:
            raise ValueError(f"Expected {NUM_SLOTS} components, got {components.shape[-1]}")
        components = as_value(components)

        dropped = [
            name for idx, name in enumerate(SLOT_NAMES)
            if name not in cls.SHAPE and bool((components[..., idx] != 0).any())
        ]
        if dropped:
            raise ShapeMismatchError("tensor", cls.__name__, dropped)

        return cls._from_components(tuple(
            Real(components[..., idx]) if name in cls.SHAPE else ABSENT
            for idx, name in enumerate(SLOT_NAMES)
        ))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> "GenericMultiVector":
        return self

    def __deepcopy__(self, memo) -> "GenericMultiVector":
        return self

    def __reduce__(self):
        return (_rebuild, (self.SHAPE.mask, self._components))

    # === Read access ===

    @property
    def components(self) -> Tuple[Tag, ...]:
        """The eight slot tags in slot order."""
        return self._components

    def tag(self, slot: SlotKey) -> Tag:
        return self._components[slot_index(slot)]

    def _read(self, idx: int) -> torch.Tensor:
        tag = self._components[idx]
        if tag is ABSENT:
            return self._zeros()
        return tag.value

    def __getitem__(self, slot: SlotKey) -> torch.Tensor:
        return self._read(slot_index(slot))

    def value(self, slot: SlotKey) -> float:
        """Slot value as a Python float; Absent slots read as 0.0."""
        return float(self[slot])

    @property
    def s(self) -> torch.Tensor:
        return self._read(IDX_S)

    @property
    def e0(self) -> torch.Tensor:
        return self._read(IDX_E0)

    @property
    def e1(self) -> torch.Tensor:
        return self._read(IDX_E1)

    @property
    def e2(self) -> torch.Tensor:
        return self._read(IDX_E2)

    @property
    def e01(self) -> torch.Tensor:
        return self._read(IDX_E01)

    @property
    def e02(self) -> torch.Tensor:
        return self._read(IDX_E02)

    @property
    def e12(self) -> torch.Tensor:
        return self._read(IDX_E12)

    @property
    def e012(self) -> torch.Tensor:
        return self._read(IDX_E012)

    def _real_values(self):
        return [tag.value for tag in self._components if tag is not ABSENT]

    @property
    def batch_shape(self) -> torch.Size:
        """Broadcast shape of the stored values; () for plain numbers."""
        values = self._real_values()
        if not values:
            return torch.Size(())
        return torch.broadcast_shapes(*(v.shape for v in values))

    @property
    def dtype(self) -> torch.dtype:
        """Promoted dtype of all stored values."""
        values = self._real_values()
        if not values:
            return DEFAULT_DTYPE
        return reduce(torch.promote_types, (v.dtype for v in values))

    @property
    def device(self) -> torch.device:
        values = self._real_values()
        return values[0].device if values else torch.device(DEFAULT_DEVICE)

    def _zeros(self) -> torch.Tensor:
        return torch.zeros(self.batch_shape, dtype=self.dtype, device=self.device)

    def to_tensor(self) -> torch.Tensor:
        """Dense (..., 8) tensor in slot order, zeros for Absent slots."""
        batch_shape, dtype = self.batch_shape, self.dtype
        return torch.stack(
            [self._read(i).to(dtype).expand(batch_shape) for i in range(NUM_SLOTS)], dim=-1
        )

    def to_list(self) -> list:
        return self.to_tensor().tolist()

    def to_dict(self) -> Dict[str, float]:
        """Slot name -> float. Only for records holding plain numbers."""
        return {name: self.value(name) for name in SLOT_NAMES}

    # === Shape operations ===

    def into(self, target: Union[Type["GenericMultiVector"], Shape]) -> "GenericMultiVector":
        """Widen into another shape. See convert()."""
        return convert(self, target)

    def grade(self, k: int) -> "GenericMultiVector":
        """Grade-k part; the result keeps only this record's grade-k slots."""
        if not 0 <= k < NUM_GRADES:
            raise ValueError(f"Grade must be in [0, {NUM_GRADES}), got {k}")
        shape = self.SHAPE & Shape.of_grade(k)
        return shape_class(shape)._from_components(tuple(
            tag if SLOT_GRADES[i] == k else ABSENT
            for i, tag in enumerate(self._components)
        ))

    def reverse(self) -> "GenericMultiVector":
        """
        Reversion: ~M

        Grade k gets sign (-1)^(k(k-1)/2), so grades 2 and 3 flip.
        """
        return type(self)._from_components(tuple(
            negate_tag(tag) if SLOT_GRADES[i] in REVERSION_GRADES else tag
            for i, tag in enumerate(self._components)
        ))

    def __invert__(self) -> "GenericMultiVector":
        """Operator ~: reversion."""
        return self.reverse()

    # === Arithmetic ===

    def __neg__(self) -> "GenericMultiVector":
        return negate(self)

    def __add__(self, other) -> "GenericMultiVector":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return add(self, other)

    def __radd__(self, other) -> "GenericMultiVector":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return add(other, self)

    def __sub__(self, other) -> "GenericMultiVector":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return subtract(self, other)

    def __rsub__(self, other) -> "GenericMultiVector":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return subtract(other, self)

    def __mul__(self, other) -> "GenericMultiVector":
        """Geometric product."""
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return geometric_product(self, other)

    def __rmul__(self, other) -> "GenericMultiVector":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return geometric_product(other, self)

    def __truediv__(self, other) -> "GenericMultiVector":
        """Division by a number or tensor."""
        if isinstance(other, (int, float, torch.Tensor)):
            return geometric_product(self, Scalar(1.0 / as_value(other)))
        return NotImplemented

    # === Comparison ===

    def __eq__(self, other) -> bool:
        """
        Exact comparison after widening both sides to their union shape.

        An Absent slot equals a Real slot holding exactly zero.
        """
        if not isinstance(other, GenericMultiVector):
            return NotImplemented
        try:
            torch.broadcast_shapes(self.batch_shape, other.batch_shape)
        except RuntimeError:
            return False
        for lhs, rhs in zip(self._components, other._components):
            if lhs is ABSENT and rhs is ABSENT:
                continue
            if lhs is ABSENT:
                equal = (rhs.value == 0).all()
            elif rhs is ABSENT:
                equal = (lhs.value == 0).all()
            else:
                equal = (lhs.value == rhs.value).all()
            if not bool(equal):
                return False
        return True

    __hash__ = None

    def __repr__(self) -> str:
        name = type(self).__name__
        if self.batch_shape != torch.Size(()):
            return f"{name}(batch_shape={tuple(self.batch_shape)})"
        fields = ", ".join(
            f"{SLOT_NAMES[i]}={tag.value.item()!r}"
            for i, tag in enumerate(self._components) if tag is not ABSENT
        )
        return f"{name}({fields})"


# =============================================================================
# Named specializations
# =============================================================================

class MultiVector(GenericMultiVector):
    """All eight slots Real."""
    SHAPE = Shape.full()
    __slots__ = ()


class Scalar(GenericMultiVector):
    """Grade 0."""
    SHAPE = Shape.of("s")
    __slots__ = ()


class Vector(GenericMultiVector):
    """Grade 1: a line a*e1 + b*e2 + c*e0 (the line ax + by + c = 0)."""
    SHAPE = Shape.of("e0", "e1", "e2")
    __slots__ = ()


class BiVector(GenericMultiVector):
    """Grade 2: a point, finite when e12 != 0 and ideal (a direction) otherwise."""
    SHAPE = Shape.of("e01", "e02", "e12")
    __slots__ = ()


class TriVector(GenericMultiVector):
    """Grade 3: the pseudoscalar e012."""
    SHAPE = Shape.of("e012")
    __slots__ = ()


class Motor(GenericMultiVector):
    """Even subalgebra: scalar plus bivector. Product of two Vectors."""
    SHAPE = Shape.of("s", "e01", "e02", "e12")
    __slots__ = ()


Line = Vector
Point = BiVector


def shape_class(shape: Shape) -> Type[GenericMultiVector]:
    """
    Class for a shape: the named specialization when one matches,
    otherwise an anonymous GenericMultiVector subclass (created once).
    """
    cls = _SHAPE_CLASSES.get(shape.mask)
    if cls is None:
        name = f"GenericMultiVector[{', '.join(shape)}]"
        cls = type(name, (GenericMultiVector,), {"SHAPE": shape, "__slots__": ()})
        cls.__module__ = __name__
        logger.debug("Created multivector class %s", name)
    # Another thread may have registered this shape first
    return _SHAPE_CLASSES[shape.mask]


def _rebuild(mask: int, components: Tuple[Tag, ...]) -> GenericMultiVector:
    return shape_class(Shape(mask))._from_components(components)


def _coerce(other) -> Optional[GenericMultiVector]:
    """Promote numbers and tensors to Scalar; None if not an operand."""
    if isinstance(other, GenericMultiVector):
        return other
    if isinstance(other, (int, float, torch.Tensor)):
        return Scalar(other)
    return None


def _shape_of(target: Union[Type[GenericMultiVector], GenericMultiVector, Shape]) -> Shape:
    if isinstance(target, Shape):
        return target
    if target.SHAPE is None:
        raise TypeError("GenericMultiVector has no shape; use a specialization or shape_class()")
    return target.SHAPE


# =============================================================================
# Linear operators
# =============================================================================

def negate(a: GenericMultiVector) -> GenericMultiVector:
    """Negate every slot. Same shape as the input."""
    return type(a)._from_components(tuple(negate_tag(tag) for tag in a._components))


def add(a: GenericMultiVector, b: GenericMultiVector) -> GenericMultiVector:
    """Slot-wise sum. The result shape is the union of both shapes."""
    cls = shape_class(a.SHAPE | b.SHAPE)
    return cls._from_components(tuple(
        add_tag(lhs, rhs) for lhs, rhs in zip(a._components, b._components)
    ))


def subtract(a: GenericMultiVector, b: GenericMultiVector) -> GenericMultiVector:
    """Slot-wise difference. The result shape is the union of both shapes."""
    cls = shape_class(a.SHAPE | b.SHAPE)
    return cls._from_components(tuple(
        sub_tag(lhs, rhs) for lhs, rhs in zip(a._components, b._components)
    ))


# =============================================================================
# Geometric product
# =============================================================================

def geometric_product(
    a: GenericMultiVector,
    b: GenericMultiVector,
    table: Union[ProductTable, str] = CAYLEY_TABLE,
) -> GenericMultiVector:
    """
    Compute the geometric product a * b.

    Only terms whose two factors are Real on their operands are evaluated.
    An output slot with no such term is Absent; one with at least one term
    is Real even if the terms happen to cancel to zero.

    Args:
        a: Left operand
        b: Right operand
        table: Product table or its name (default: the Cayley table)
    """
    plan = get_product_table(table).plan(a.SHAPE, b.SHAPE)
    left, right = a._components, b._components

    out = []
    for terms in plan.slots:
        acc = ABSENT
        for sign, i, j in terms:
            term = mul_tag(left[i], right[j])
            acc = add_tag(acc, term) if sign > 0 else sub_tag(acc, term)
        out.append(acc)

    return shape_class(plan.shape)._from_components(tuple(out))


# =============================================================================
# Conversion
# =============================================================================

def can_convert(
    source: Union[Type[GenericMultiVector], GenericMultiVector, Shape],
    target: Union[Type[GenericMultiVector], GenericMultiVector, Shape],
) -> bool:
    """True when every Real slot of source is Real in target."""
    return _shape_of(source).issubset(_shape_of(target))


def convert(
    value: GenericMultiVector,
    target: Union[Type[GenericMultiVector], Shape],
) -> GenericMultiVector:
    """
    Widen a multivector into another shape.

    Slots Real in the target but Absent in the value become Real(0.0).
    The check depends only on the two shapes: a target that would drop a
    Real slot raises ShapeMismatchError whatever the stored values are.
    """
    target_shape = _shape_of(target)
    target_cls = shape_class(target_shape)

    dropped = value.SHAPE - target_shape
    if len(dropped):
        raise ShapeMismatchError(type(value).__name__, target_cls.__name__, dropped.names)

    zero = None
    components = []
    for i, tag in enumerate(value._components):
        if (target_shape.mask >> i) & 1 and tag is ABSENT:
            if zero is None:
                zero = Real(value._zeros())
            tag = zero
        components.append(tag)
    return target_cls._from_components(tuple(components))


def allclose(a: GenericMultiVector, b: GenericMultiVector, atol: float = DEFAULT_ATOL) -> bool:
    """Tolerant comparison over all eight slots."""
    dtype = torch.promote_types(a.dtype, b.dtype)
    return torch.allclose(a.to_tensor().to(dtype), b.to_tensor().to(dtype), atol=atol, rtol=0.0)
