"""
Product tables for the geometric product of G(2,0,1).

A product table is a flat list of signed terms

    (sign, left_slot, right_slot, out_slot)

meaning "add sign * left[left_slot] * right[right_slot] into out[out_slot]".
Given the shapes of two operands, only the terms whose factors are both Real
survive; an output slot with no surviving term is Absent. The surviving
terms for a (table, left shape, right shape) triple are compiled once into a
ProductPlan and cached, so records of a given pair of shapes always run the
same fixed sequence of multiplies and adds.

Two tables are provided:

- CAYLEY_TABLE: the signed 8x8 Cayley table of G(2,0,1), e0² = 0,
  e1² = e2² = 1. Hard-coded, checked against blade multiplication by
  scripts/verify_cayley.py and the test suite.
- TRANSCRIBED_TABLE: the hand-expanded formula from the engine's original
  derivation notes, reproduced term for term. It disagrees with the Cayley
  table in several slots (e1 reads "g*l + g*n", e2 counts "d*i" twice) and
  is kept for comparison, not as the default.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Dict, Iterable, List, NamedTuple, Tuple
import logging

import torch

from ..core.constants import NUM_SLOTS, SLOT_NAMES, METRIC, TABLE_CAYLEY, TABLE_TRANSCRIBED
from .shape import Shape

logger = logging.getLogger(__name__)


class Term(NamedTuple):
    """One signed basis-pair product."""
    sign: int
    left: int
    right: int
    out: int


class ProductPlan(NamedTuple):
    """Surviving terms for one pair of operand shapes."""
    shape: Shape
    # Per output slot: tuple of (sign, left, right); empty for Absent slots
    slots: Tuple[Tuple[Tuple[int, int, int], ...], ...]

    @property
    def num_terms(self) -> int:
        return sum(len(terms) for terms in self.slots)


class ProductTable:
    """
    A bilinear product over the eight basis slots.

    Args:
        name: Identifier used by Config.product_table and in log messages
        terms: Signed terms; zero-sign entries are dropped
    """

    def __init__(self, name: str, terms: Iterable[Term]):
        self.name = name
        self.terms: Tuple[Term, ...] = tuple(t for t in terms if t.sign != 0)

    @classmethod
    def from_products(cls, name: str, products: Iterable[Tuple[int, int, int, int]]) -> "ProductTable":
        """Build from (i, j, sign, k) entries: e_i * e_j = sign * e_k."""
        return cls(name, (Term(sign, i, j, k) for i, j, sign, k in products))

    @classmethod
    def from_formula(cls, name: str, formula: Dict[str, str]) -> "ProductTable":
        """
        Build from a letter formula.

        Left operand slots are lettered a..h and right operand slots i..p,
        both in slot order. Each output slot maps to a string of signed
        products, e.g. "+a*i +c*k -g*o".
        """
        terms = []
        for out_name, expr in formula.items():
            out = SLOT_NAMES.index(out_name)
            for token in expr.split():
                sign = -1 if token[0] == "-" else 1
                left, right = token.lstrip("+-").split("*")
                terms.append(Term(sign, ord(left) - ord("a"), ord(right) - ord("i"), out))
        return cls(name, terms)

    def terms_for(self, out: int) -> Tuple[Term, ...]:
        """All terms contributing to one output slot."""
        return tuple(t for t in self.terms if t.out == out)

    def plan(self, left: Shape, right: Shape) -> ProductPlan:
        """Cached plan of surviving terms for a pair of operand shapes."""
        return _compile_plan(self, left.mask, right.mask)

    def output_shape(self, left: Shape, right: Shape) -> Shape:
        return self.plan(left, right).shape

    def to_matrix(self) -> Tuple[torch.Tensor, torch.Tensor]:
        """
        Sign and index matrices, (8, 8) each.

        Only defined when each basis pair appears at most once, which holds
        for CAYLEY_TABLE but not for TRANSCRIBED_TABLE.
        """
        signs = torch.zeros(NUM_SLOTS, NUM_SLOTS, dtype=torch.float32)
        indices = torch.zeros(NUM_SLOTS, NUM_SLOTS, dtype=torch.long)
        for t in self.terms:
            if signs[t.left, t.right] != 0:
                raise ValueError(
                    f"Table {self.name!r} has more than one term for "
                    f"{SLOT_NAMES[t.left]}*{SLOT_NAMES[t.right]}"
                )
            signs[t.left, t.right] = t.sign
            indices[t.left, t.right] = t.out
        return signs, indices

    def __repr__(self) -> str:
        return f"ProductTable({self.name!r}, terms={len(self.terms)})"


@lru_cache(maxsize=None)
def _compile_plan(table: ProductTable, left_mask: int, right_mask: int) -> ProductPlan:
    slots: List[List[Tuple[int, int, int]]] = [[] for _ in range(NUM_SLOTS)]
    for t in table.terms:
        if left_mask >> t.left & 1 and right_mask >> t.right & 1:
            slots[t.out].append((t.sign, t.left, t.right))
    out_mask = 0
    for k, terms in enumerate(slots):
        if terms:
            out_mask |= 1 << k
    plan = ProductPlan(Shape(out_mask), tuple(tuple(terms) for terms in slots))
    logger.debug(
        "Compiled %s product plan %r * %r -> %r (%d terms)",
        table.name, Shape(left_mask), Shape(right_mask), plan.shape, plan.num_terms,
    )
    return plan


# =============================================================================
# Blade multiplication
# =============================================================================

# Basis vectors making up each slot, in canonical (sorted) order
SLOT_BLADES: Tuple[Tuple[int, ...], ...] = (
    (),          # s
    (0,),        # e0
    (1,),        # e1
    (2,),        # e2
    (0, 1),      # e01
    (0, 2),      # e02
    (1, 2),      # e12
    (0, 1, 2),   # e012
)

_GENERATOR_SQUARES = {0: METRIC["e0"], 1: METRIC["e1"], 2: METRIC["e2"]}


def multiply_blades(a: Tuple[int, ...], b: Tuple[int, ...]) -> Tuple[Tuple[int, ...], int]:
    """
    Multiply two basis blades, returning (canonical blade, sign).

    Adjacent swaps of distinct generators flip the sign, adjacent equal
    generators contract through the metric. A sign of 0 means the product
    vanishes (e0² = 0).
    """
    combined = list(a) + list(b)
    sign = 1

    changed = True
    while changed:
        changed = False
        i = 0
        while i < len(combined) - 1:
            if combined[i] == combined[i + 1]:
                square = _GENERATOR_SQUARES[combined[i]]
                if square == 0:
                    return (), 0
                sign *= square
                del combined[i:i + 2]
                changed = True
            elif combined[i] > combined[i + 1]:
                combined[i], combined[i + 1] = combined[i + 1], combined[i]
                sign = -sign
                changed = True
                i += 1
            else:
                i += 1

    return tuple(combined), sign


def derive_products() -> List[Tuple[int, int, int, int]]:
    """All 64 (i, j, sign, k) entries computed from the metric."""
    products = []
    for i, blade_i in enumerate(SLOT_BLADES):
        for j, blade_j in enumerate(SLOT_BLADES):
            blade, sign = multiply_blades(blade_i, blade_j)
            k = SLOT_BLADES.index(blade) if sign else 0
            products.append((i, j, sign, k))
    return products


# =============================================================================
# Tables
# =============================================================================

def _build_cayley_table() -> ProductTable:
    """
    Build the Cayley table for the geometric product in 2-D PGA.

    Format: (i, j, sign, k) meaning e_i * e_j = sign * e_k.
    Slots: 0:s, 1:e0, 2:e1, 3:e2, 4:e01, 5:e02, 6:e12, 7:e012
    Generated with scripts/verify_cayley.py.
    """
    products = [
        # Row 0: scalar products
        (0, 0, 1, 0), (0, 1, 1, 1), (0, 2, 1, 2), (0, 3, 1, 3),
        (0, 4, 1, 4), (0, 5, 1, 5), (0, 6, 1, 6), (0, 7, 1, 7),
        # Row 1: e0 products (e0² = 0)
        (1, 0, 1, 1), (1, 1, 0, 0), (1, 2, 1, 4), (1, 3, 1, 5),
        (1, 4, 0, 0), (1, 5, 0, 0), (1, 6, 1, 7), (1, 7, 0, 0),
        # Row 2: e1 products (e1² = 1)
        (2, 0, 1, 2), (2, 1, -1, 4), (2, 2, 1, 0), (2, 3, 1, 6),
        (2, 4, -1, 1), (2, 5, -1, 7), (2, 6, 1, 3), (2, 7, -1, 5),
        # Row 3: e2 products (e2² = 1)
        (3, 0, 1, 3), (3, 1, -1, 5), (3, 2, -1, 6), (3, 3, 1, 0),
        (3, 4, 1, 7), (3, 5, -1, 1), (3, 6, -1, 2), (3, 7, 1, 4),
        # Row 4: e01 products (e01² = 0)
        (4, 0, 1, 4), (4, 1, 0, 0), (4, 2, 1, 1), (4, 3, 1, 7),
        (4, 4, 0, 0), (4, 5, 0, 0), (4, 6, 1, 5), (4, 7, 0, 0),
        # Row 5: e02 products (e02² = 0)
        (5, 0, 1, 5), (5, 1, 0, 0), (5, 2, -1, 7), (5, 3, 1, 1),
        (5, 4, 0, 0), (5, 5, 0, 0), (5, 6, -1, 4), (5, 7, 0, 0),
        # Row 6: e12 products (e12² = -1)
        (6, 0, 1, 6), (6, 1, 1, 7), (6, 2, -1, 3), (6, 3, 1, 2),
        (6, 4, -1, 5), (6, 5, 1, 4), (6, 6, -1, 0), (6, 7, -1, 1),
        # Row 7: e012 products (e012² = 0)
        (7, 0, 1, 7), (7, 1, 0, 0), (7, 2, -1, 5), (7, 3, 1, 4),
        (7, 4, 0, 0), (7, 5, 0, 0), (7, 6, -1, 1), (7, 7, 0, 0),
    ]
    return ProductTable.from_products(TABLE_CAYLEY, products)


# Left operand a..h, right operand i..p, both in slot order
TRANSCRIBED_FORMULA: Dict[str, str] = {
    "s":    "+a*i +c*k +d*l -g*o",
    "e0":   "+a*j +b*i -c*m -d*n +e*k +f*l +g*p +h*o",
    "e1":   "+a*k +c*i -d*o +g*l +g*n",
    "e2":   "+a*l +d*i +c*o +d*i +e*o -g*k",
    "e01":  "+a*m +b*k -c*j +d*p +e*i -f*o +h*l",
    "e02":  "+a*n +b*l -d*j -c*p +f*i -g*m -h*k",
    "e12":  "+a*o +c*l -d*k +g*i",
    "e012": "+a*p +b*p -c*n +d*m +e*l -f*k +g*j +h*i",
}


CAYLEY_TABLE = _build_cayley_table()
TRANSCRIBED_TABLE = ProductTable.from_formula(TABLE_TRANSCRIBED, TRANSCRIBED_FORMULA)

CAYLEY_SIGNS, CAYLEY_INDICES = CAYLEY_TABLE.to_matrix()

PRODUCT_TABLES: Dict[str, ProductTable] = {
    TABLE_CAYLEY: CAYLEY_TABLE,
    TABLE_TRANSCRIBED: TRANSCRIBED_TABLE,
}


def get_product_table(table) -> ProductTable:
    """Resolve a table name or pass a ProductTable through."""
    if isinstance(table, ProductTable):
        return table
    try:
        return PRODUCT_TABLES[table]
    except KeyError:
        raise ValueError(
            f"Unknown product table: {table!r}. "
            f"Supported: {', '.join(PRODUCT_TABLES)}"
        ) from None
