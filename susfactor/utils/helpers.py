"""Utility helpers"""
import math


def angle_between(a, b):
    """Angle in degrees between two direction vectors."""
    mag = math.sqrt(sum(x * x for x in a) * sum(y * y for y in b))
    if mag < 1e-15:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b)) / mag
    return math.degrees(math.acos(max(-1.0, min(1.0, dot))))


def distance(p, q):
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(p, q)))


def as_vector(val, default=None):
    """Coerce a 3-item list/tuple or {'x','y','z'} mapping into a tuple of floats."""
    if val is None:
        return default
    if isinstance(val, dict):
        val = (val.get('x', 0.0), val.get('y', 0.0), val.get('z', 0.0))
    try:
        vec = tuple(float(v) for v in val)
    except (TypeError, ValueError):
        return default
    return vec if len(vec) == 3 else default


def format_uptime(seconds):
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    return f"{h}h {m}m {s}s"


def format_pct(ratio):
    return f"{ratio * 100:.2f}%"

