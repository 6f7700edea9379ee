from ..records import Status


def clamp_threshold(value):
    """Low-stock threshold is at least 1; unusable input falls back to 1."""
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return 1


def derive_status(quantity: int, low_threshold: int) -> Status:
    """
    Map (quantity, threshold) to a stock status.

    - quantity <= 0              -> Empty
    - 0 < quantity <= threshold  -> Low
    - quantity > threshold       -> Normal
    """
    if quantity <= 0:
        return Status.EMPTY
    if quantity <= low_threshold:
        return Status.LOW
    return Status.NORMAL
