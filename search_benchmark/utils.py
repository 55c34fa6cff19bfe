# --- Numeric Helpers ---

def clamp(low: int, high: int, value: int) -> int:
    """
    Clamps value into [low, high].
    The lower bound is checked first, so an empty range (low > high) yields low
    for values below it and high otherwise.
    """
    if value < low:
        return low
    elif value > high:
        return high
    return value

def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return (1.0 - t) * a + t * b
