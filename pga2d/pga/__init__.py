"""
PGA (Projective Geometric Algebra) module.

Implements the algebra of G(2,0,1) with 8-component multivectors whose
slots are individually tagged Real or Absent, the geometric product, and
rigid transformations (motors) of the plane.
"""

from .tags import (
    Absent,
    Real,
    ABSENT,
    negate_tag,
    add_tag,
    sub_tag,
    mul_tag,
)

from .shape import Shape

from .cayley import (
    ProductTable,
    CAYLEY_TABLE,
    TRANSCRIBED_TABLE,
    get_product_table,
)

from .algebra import (
    GenericMultiVector,
    MultiVector,
    Scalar,
    Vector,
    Line,
    BiVector,
    Point,
    TriVector,
    Motor,
    shape_class,
    negate,
    add,
    subtract,
    geometric_product,
    convert,
    can_convert,
    allclose,
)

from .primitives import (
    scalar,
    e0, e1, e2,
    e01, e02, e12,
    e012,
    point,
    direction,
    origin,
    point_to_cartesian,
    line,
    incidence,
    is_ideal,
)

from .transforms import (
    sandwich,
    identity_motor,
    translator,
    rotor,
    rotor_about,
    transform_point,
    transform_line,
    compose,
)

__all__ = [
    # Tags
    "Absent",
    "Real",
    "ABSENT",
    "negate_tag",
    "add_tag",
    "sub_tag",
    "mul_tag",
    "Shape",
    # Product tables
    "ProductTable",
    "CAYLEY_TABLE",
    "TRANSCRIBED_TABLE",
    "get_product_table",
    # Algebra
    "GenericMultiVector",
    "MultiVector",
    "Scalar",
    "Vector",
    "Line",
    "BiVector",
    "Point",
    "TriVector",
    "Motor",
    "shape_class",
    "negate",
    "add",
    "subtract",
    "geometric_product",
    "convert",
    "can_convert",
    "allclose",
    # Primitives
    "scalar",
    "e0", "e1", "e2",
    "e01", "e02", "e12",
    "e012",
    "point",
    "direction",
    "origin",
    "point_to_cartesian",
    "line",
    "incidence",
    "is_ideal",
    # Transforms
    "sandwich",
    "identity_motor",
    "translator",
    "rotor",
    "rotor_about",
    "transform_point",
    "transform_line",
    "compose",
]
