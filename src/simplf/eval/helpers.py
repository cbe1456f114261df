from __future__ import annotations

from ..types import SfBool, SfNil, SfValue


def is_truthy(val: SfValue) -> bool:
    """nil and false are falsy; everything else, 0 and "" included, is truthy."""
    match val:
        case SfNil():
            return False
        case SfBool(value=b):
            return b
        case _:
            return True
