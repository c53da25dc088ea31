"""Schedule reflow - push overlapping stops later so visits never collide."""

from collections.abc import Sequence

from atlantico.app.models.stop import Stop


def reflow(stops: Sequence[Stop]) -> list[Stop]:
    """Shift start times so each stop begins no earlier than its predecessor ends.

    Single left-to-right pass. A stop that starts before the previous
    (already adjusted) stop ends is moved to that end time; stops that
    start later keep their start, so gaps are preserved. Touching stops
    (start == previous end) do not overlap.

    Only ``start`` changes. The input sequence and its stops are not
    mutated: shifted stops are copies, untouched ones are returned as-is.
    Starts must be comparable, all naive or all timezone-aware, which
    ``Itinerary`` validation guarantees.

    Args:
        stops: Stops in visit order

    Returns:
        New list of the same length and order with no overlaps
    """
    result: list[Stop] = []
    for stop in stops:
        if result:
            prev_end = result[-1].end
            if stop.start < prev_end:
                stop = stop.model_copy(update={"start": prev_end})
        result.append(stop)
    return result


def is_monotonic(stops: Sequence[Stop]) -> bool:
    """True when every stop starts at or after the previous stop's end."""
    return all(nxt.start >= prev.end for prev, nxt in zip(stops, stops[1:]))


def change_duration(stops: Sequence[Stop], index: int, duration_minutes: int) -> list[Stop]:
    """Set one stop's duration and cascade the change to every later stop.

    Raises:
        IndexError: index is outside the sequence
        ValueError: duration_minutes is not positive
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
    updated = list(stops)
    updated[index] = updated[index].model_copy(update={"duration_minutes": duration_minutes})
    return reflow(updated)
