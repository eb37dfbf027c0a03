"""
Exceptions raised by PGA2D.

Arithmetic is total, so the only failures are shape violations: asking a
record of one shape to hold a value in a slot that shape fixes as absent.
"""


class ShapeMismatchError(TypeError):
    """A value would land in a slot the target shape holds as Absent."""

    def __init__(self, source: str, target: str, slots):
        self.source = source
        self.target = target
        self.slots = tuple(slots)
        super().__init__(
            f"Cannot convert {source} into {target}: "
            f"slots {', '.join(self.slots)} would be discarded"
        )
