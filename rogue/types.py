"""Value model and helpers for Rogue.

Runtime values are plain Python objects: ``int`` for Integer, ``float`` for
Float, ``str`` for String and ``bool`` for Boolean. ``None`` is reserved for
"no value yet" (a declaration without an initializer), so the Rogue ``null``
value is represented by the :data:`NULL` marker instead.

Because ``bool`` is a subclass of ``int`` every helper here checks for
``bool`` before ``int``.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple


class NullVal:
    """Marker object for the Rogue ``null`` value."""
    _instance: Optional['NullVal'] = None

    def __new__(cls) -> 'NullVal':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'null'


NULL = NullVal()


# Accepted annotation spellings per value category. The first spelling is the
# one used when naming a value's type in diagnostics.
ANNOTATIONS: Dict[str, Tuple[str, ...]] = {
    'Integer': ('i32', 'u32'),
    'Float': ('f64', 'f32'),
    'Boolean': ('boolean',),
    'String': ('String', 'string'),
}


def type_name(value: Any) -> str:
    """Return the Rogue category name of a runtime value."""
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, int):
        return 'Integer'
    if isinstance(value, float):
        return 'Float'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NullVal):
        return 'Null'
    return type(value).__name__


def annotation_category(annotation: str) -> Optional[str]:
    """Map an annotation spelling such as ``u32`` to its value category."""
    for category, spellings in ANNOTATIONS.items():
        if annotation in spellings:
            return category
    return None


def check_annotation(annotation: str, value: Any) -> Optional[Tuple[str, List[str]]]:
    """Check a value against a declared type annotation.

    Returns ``None`` when the value is acceptable, otherwise a ``(got,
    expected)`` pair for the caller to raise a type mismatch with. For a known
    annotation ``got`` names the value's category and ``expected`` lists the
    annotation's spellings. For an unknown annotation ``got`` is the
    annotation itself and ``expected`` lists the spellings that would have
    matched the value.
    """
    category = type_name(value)
    accepted = ANNOTATIONS.get(category, ())
    if annotation in accepted:
        return None
    wanted = annotation_category(annotation)
    if wanted is not None:
        return category, list(ANNOTATIONS[wanted])
    return annotation, list(accepted)


def is_truthy(value: Any) -> bool:
    """Only ``null`` and ``false`` are falsy."""
    if isinstance(value, NullVal):
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality: same category and same payload."""
    if isinstance(a, NullVal) or isinstance(b, NullVal):
        return isinstance(a, NullVal) and isinstance(b, NullVal)
    if type_name(a) != type_name(b):
        return False
    return a == b


def as_float(value: Any) -> Optional[float]:
    """Widen a numeric value to float; ``None`` for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def divide(a: float, b: float) -> float:
    """IEEE 754 division, which Python's ``/`` refuses for a zero divisor."""
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def format_float(value: float) -> str:
    """Shortest round-tripping digits, written out without an exponent.

    ``2.0 ** 60`` prints as ``1152921504606847000`` and ``1e-05`` as
    ``0.00001``; integral values drop the fraction.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    return format(Decimal(repr(value)).normalize(), 'f')


def to_string(value: Any) -> str:
    """Convert a Rogue value to the text ``echo`` prints for it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NullVal):
        return 'null'
    return str(value)
