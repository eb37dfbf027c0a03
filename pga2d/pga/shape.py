"""
Multivector shapes.

A shape records, for each of the eight basis slots, whether the slot is
Real (bit set) or Absent (bit clear). Shapes are what operations reason
about when they plan which multiplies and adds to run: two records of the
same shape always take the same code path.
"""

from __future__ import annotations
from typing import Iterator, Tuple

from ..core.constants import SLOT_NAMES, SLOT_INDEX, SLOT_GRADES, NUM_SLOTS
from ..core.types import SlotKey


FULL_MASK = (1 << NUM_SLOTS) - 1


def slot_index(key: SlotKey) -> int:
    """Resolve a slot name or index to an index in [0, 8)."""
    if isinstance(key, str):
        try:
            return SLOT_INDEX[key]
        except KeyError:
            raise TypeError(f"Unknown basis slot: {key!r}") from None
    if isinstance(key, int) and 0 <= key < NUM_SLOTS:
        return key
    raise TypeError(f"Unknown basis slot: {key!r}")


class Shape:
    """Immutable set of Real slots, stored as an 8-bit mask."""

    __slots__ = ("mask",)

    def __init__(self, mask: int = 0):
        if not 0 <= mask <= FULL_MASK:
            raise ValueError(f"Shape mask out of range: {mask}")
        object.__setattr__(self, "mask", mask)

    def __setattr__(self, name, value):
        raise AttributeError("Shape is immutable")

    @classmethod
    def of(cls, *slots: SlotKey) -> "Shape":
        """Shape with exactly the given slots Real."""
        mask = 0
        for key in slots:
            mask |= 1 << slot_index(key)
        return cls(mask)

    @classmethod
    def full(cls) -> "Shape":
        return cls(FULL_MASK)

    @classmethod
    def empty(cls) -> "Shape":
        return cls(0)

    @classmethod
    def of_grade(cls, *grades: int) -> "Shape":
        """Shape holding every slot of the given grades."""
        return cls.of(*(i for i, g in enumerate(SLOT_GRADES) if g in grades))

    def __contains__(self, key: SlotKey) -> bool:
        return bool(self.mask & (1 << slot_index(key)))

    def __iter__(self) -> Iterator[str]:
        return (SLOT_NAMES[i] for i in self.indices)

    def __len__(self) -> int:
        return bin(self.mask).count("1")

    @property
    def indices(self) -> Tuple[int, ...]:
        return tuple(i for i in range(NUM_SLOTS) if self.mask & (1 << i))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self)

    @property
    def grades(self) -> Tuple[int, ...]:
        """Sorted distinct grades present."""
        return tuple(sorted({SLOT_GRADES[i] for i in self.indices}))

    def union(self, other: "Shape") -> "Shape":
        return Shape(self.mask | other.mask)

    def intersection(self, other: "Shape") -> "Shape":
        return Shape(self.mask & other.mask)

    def difference(self, other: "Shape") -> "Shape":
        return Shape(self.mask & ~other.mask)

    __or__ = union
    __and__ = intersection
    __sub__ = difference

    def issubset(self, other: "Shape") -> bool:
        return self.mask & ~other.mask == 0

    __le__ = issubset

    def __eq__(self, other) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.mask == other.mask

    def __hash__(self) -> int:
        return hash(("Shape", self.mask))

    def __reduce__(self):
        return (Shape, (self.mask,))

    def __repr__(self) -> str:
        return f"Shape({', '.join(self)})"
