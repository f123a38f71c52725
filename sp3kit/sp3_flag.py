"""
Events recorded in an SP3 data block and the flag (bitset) that holds them.
"""
from enum import IntEnum


class Sp3Event(IntEnum):
    """
    An event that can be recorded for one satellite at one epoch. Values are
    bit positions inside an Sp3Flag.
    """
    # Bad or absent positional values are set to 0.000000
    ABSENT_POSITION = 0
    # Bad or absent clock values are set to 999999.999999
    ABSENT_CLOCK = 1
    # Column 75 'E': discontinuity in the satellite clock correction
    CLOCK_EVENT = 2
    # Column 76 'P': clock correction at this epoch is predicted
    CLOCK_PREDICTION = 3
    # Column 79 'M': orbit maneuver since the previous epoch
    MANEUVER = 4
    # Column 80 'P': position at this epoch is predicted
    ORBIT_PREDICTION = 5
    HAS_POSITION_STDDEV = 6
    HAS_CLOCK_STDDEV = 7
    ABSENT_VELOCITY = 8
    ABSENT_CLOCK_RATE = 9
    HAS_VELOCITY_STDDEV = 10
    HAS_CLOCK_RATE_STDDEV = 11


class Sp3Flag:
    """
    Bitset of Sp3Event's. Starts clean (no event set).

    Several events can be set (or cleared) in one call:
        flag.set(Sp3Event.ABSENT_POSITION, Sp3Event.ABSENT_CLOCK)
    """

    __slots__ = ("bits",)

    PESSIMISTIC_DEFAULTS = (
        Sp3Event.ABSENT_POSITION,
        Sp3Event.ABSENT_CLOCK,
        Sp3Event.ABSENT_VELOCITY,
        Sp3Event.ABSENT_CLOCK_RATE,
    )

    def __init__(self, bits: int = 0):
        self.bits = bits

    def set(self, *events: Sp3Event) -> None:
        for e in events:
            self.bits |= 1 << int(e)

    def clear(self, *events: Sp3Event) -> None:
        for e in events:
            self.bits &= ~(1 << int(e))

    def is_set(self, event: Sp3Event) -> bool:
        return bool((self.bits >> int(event)) & 1)

    def is_clean(self) -> bool:
        return self.bits == 0

    def reset(self) -> None:
        self.bits = 0

    def reset_to_pessimistic_defaults(self) -> None:
        """Clear every event, then mark position, clock, velocity and clock-rate as absent."""
        self.reset()
        self.set(*self.PESSIMISTIC_DEFAULTS)

    def events(self):
        """Return the list of events currently set."""
        return [e for e in Sp3Event if self.is_set(e)]

    def copy(self) -> "Sp3Flag":
        return Sp3Flag(self.bits)

    def __eq__(self, other):
        if isinstance(other, Sp3Flag):
            return self.bits == other.bits
        return NotImplemented

    def __repr__(self):
        names = "|".join(e.name for e in self.events())
        return f"Sp3Flag({names or 'clean'})"


__all__ = ["Sp3Event", "Sp3Flag"]
