"""
Example 01: Points, Lines and Motors

Demonstrates:
1. Building points and lines and testing incidence.
2. How operand shapes decide which slots a product computes.
3. Moving a triangle with translators and rotors.
4. Running the same product under the transcribed table.
"""

import logging
import math

import torch

from pga2d.pga import (
    Vector,
    point,
    line,
    incidence,
    point_to_cartesian,
    translator,
    rotor_about,
    compose,
    transform_point,
    transform_line,
    geometric_product,
    MultiVector,
)
from pga2d.utils import Config

logger = logging.getLogger("pga2d.examples")


# =============================================================================
# 1. Incidence
# =============================================================================

def incidence_demo(config: Config):
    # 2x - y + 1 = 0
    l = line(2.0, -1.0, 1.0, **config.tensor_kwargs())
    for x, y in [(0.0, 1.0), (1.0, 3.0), (2.0, 2.0)]:
        p = point(x, y, **config.tensor_kwargs())
        logger.info("(%g, %g) against 2x - y + 1 = 0: %g", x, y, incidence(l, p).item())


# =============================================================================
# 2. Shapes
# =============================================================================

def shape_demo():
    a = Vector(1.0, 2.0, 3.0)
    b = Vector(4.0, 5.0, 6.0)
    logger.info("Vector + Vector -> %s", type(a + b).__name__)
    logger.info("Vector * Vector -> %s %r", type(a * b).__name__, a * b)
    logger.info("Scalar + Vector -> %s", type(1.0 + a).__name__)


# =============================================================================
# 3. Motors
# =============================================================================

def motor_demo(config: Config):
    corners = torch.tensor([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]], dtype=config.torch_dtype)
    triangle = point(corners[:, 0], corners[:, 1])

    # Quarter turn about (1, 1), then shift right by 2
    motion = compose(translator(2.0, 0.0), rotor_about(math.pi / 2, 1.0, 1.0))
    moved = transform_point(motion, triangle)
    logger.info("Triangle moved to:\n%s", point_to_cartesian(moved))

    edge = line(0.0, 1.0, 0.0)  # y = 0
    moved_edge = transform_line(motion, edge)
    logger.info("Edge y = 0 moved to %r", moved_edge)
    on_edge = incidence(moved_edge, moved)
    logger.info("First two corners stay on the moved edge: %s", on_edge[:2].abs().lt(1e-5).tolist())


# =============================================================================
# 4. Product tables
# =============================================================================

def table_demo(config: Config):
    a = MultiVector(2, 3, 5, 7, 11, 13, 17, 19)
    b = MultiVector(23, 29, 31, 37, 41, 43, 47, 53)
    for name in ("cayley", "transcribed"):
        table = config.update(product_table=name).table
        logger.info("%-12s %s", name, geometric_product(a, b, table=table).to_list())


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    config = Config()

    incidence_demo(config)
    shape_demo()
    motor_demo(config)
    table_demo(config)


if __name__ == "__main__":
    main()
