"""Decode the ups.status flag word into individual flags."""

from nut_client.protocol.constants import STATUS_FLAGS


def status_words(status: str | None) -> list[str]:
    """Split a ups.status value such as ``"OL CHRG"`` into its words."""
    if not status:
        return []
    return status.split()


def decode_flags(status: str | None, flag_map: dict[str, str]) -> dict[str, bool]:
    """Decode a space-separated flag word into a dict of {label: is_set}.

    Args:
        status: The raw value (e.g. "OB LB"). None or "" leaves every flag clear.
        flag_map: Mapping of flag word to label string.

    Returns:
        Dict of {label: bool} for each flag in the map, in map order.
    """
    present = set(status_words(status))
    return {label: word in present for word, label in flag_map.items()}


def decode_status(status: str | None) -> dict[str, bool]:
    """Decode ups.status."""
    return decode_flags(status, STATUS_FLAGS)


def active_flags(status: str | None) -> list[str]:
    """Labels of the flags set in ``status``, in the order they were sent."""
    return [STATUS_FLAGS[word] for word in status_words(status)
            if word in STATUS_FLAGS]


def unknown_flags(status: str | None) -> list[str]:
    """Words in ``status`` that are not in STATUS_FLAGS."""
    return [word for word in status_words(status) if word not in STATUS_FLAGS]
