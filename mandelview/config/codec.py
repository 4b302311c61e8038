from __future__ import annotations

import math
import numbers
import re
from typing import Any, Sequence

import numpy as np

from mandelview.util.logging_setup import get_logger

TRUE_LITERALS = ("1", "yes", "YES", "Yes")

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_NUM = r"\s*(-?[0-9.]+)\s*"

def _vec_pattern(n: int) -> re.Pattern:
    return re.compile(r"^\s*vec%d\(%s\)\s*$" % (n, ",".join([_NUM] * n)))

_VEC_PATTERNS = {n: _vec_pattern(n) for n in (2, 3, 4)}

def encode_bool(value: bool) -> str:
    return "yes" if value else "no"

def encode_int(value: int) -> str:
    return "%d" % int(value)

def _finite(value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"cannot encode non-finite value {value}")
    return value

def encode_float(value: float) -> str:
    return "%.5f" % _finite(value)

def encode_vec(value: Sequence[float]) -> str:
    components = [_finite(c) for c in value]
    n = len(components)
    if n not in _VEC_PATTERNS:
        raise ValueError(f"vectors must have 2, 3 or 4 components, got {n}")
    return "vec%d(%s)" % (n, ", ".join("%.5f" % c for c in components))

def encode(value: Any) -> str:
    """Canonical text for a typed value.

    bool must be tested before int since bool is an int subclass.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, np.bool_)):
        return encode_bool(bool(value))
    if isinstance(value, numbers.Integral):
        return encode_int(value)
    if isinstance(value, numbers.Real):
        return encode_float(value)
    if isinstance(value, (np.ndarray, list, tuple)):
        return encode_vec(value)
    raise TypeError(f"cannot encode value of type {type(value).__name__}")

def decode_bool(text: str) -> bool:
    return text in TRUE_LITERALS

def decode_int(text: str) -> int:
    m = _INT_PREFIX.match(text)
    if not m:
        return 0
    return int(m.group(1))

def decode_float(text: str) -> float:
    m = _FLOAT_PREFIX.match(text)
    if not m:
        return 0.0
    return float(m.group(1))

def decode_vec(text: str, n: int) -> np.ndarray:
    pattern = _VEC_PATTERNS.get(n)
    if pattern is None:
        raise ValueError(f"vectors must have 2, 3 or 4 components, got {n}")
    m = pattern.match(text)
    if not m:
        get_logger().debug("'%s' did not match vec%d grammar", text, n)
        return np.zeros(n, dtype=float)
    return np.array([decode_float(g) for g in m.groups()], dtype=float)

def decode_vec2(text: str) -> np.ndarray:
    return decode_vec(text, 2)

def decode_vec3(text: str) -> np.ndarray:
    return decode_vec(text, 3)

def decode_vec4(text: str) -> np.ndarray:
    return decode_vec(text, 4)
