from decimal import Decimal, ROUND_HALF_UP

SIZE_UNITS = ["B", "KB", "MB", "GB"]


def compute_reduction(original_size: int, optimized_size: int) -> str:
    """Percentage decrease from original to optimized, as a two decimal string.

    An empty original has nothing to reduce, so it reports "0.00" rather than
    dividing by zero. Outputs larger than the input give a negative value.
    """
    if original_size <= 0:
        return "0.00"
    percent = Decimal(original_size - optimized_size) / Decimal(original_size) * 100
    return str(percent.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_size(num_bytes: int) -> str:
    if num_bytes == 0:
        return "0 B"
    value = float(abs(num_bytes))
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    sign = "-" if num_bytes < 0 else ""
    return f"{sign}{value:.2f} {SIZE_UNITS[unit]}"
