import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with exact halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def round_tenths(value: float) -> float:
    return round_half_up(value * 10) / 10


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round_half_up(meters)}m"
    return f"{round_tenths(meters / 1000):.1f}km"


def format_duration(seconds: float) -> str:
    minutes = round_half_up(seconds / 60)
    if minutes < 60:
        return f"{minutes}min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}min"
