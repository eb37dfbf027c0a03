"""
Type aliases for PGA2D.

A slot value is anything that converts to a floating point tensor: Python
numbers or tensors. Plain numbers become 0-dim tensors, tensors keep their
shape and broadcast like any other torch arithmetic.
"""

from typing import Union
import torch


# Anything accepted where a slot value is expected
ValueLike = Union[int, float, torch.Tensor]

# Slot reference: a name from SLOT_NAMES or its index
SlotKey = Union[str, int]
