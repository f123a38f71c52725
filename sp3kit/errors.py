"""
Exception hierarchy for SP3 parsing and satellite-state interpolation.

Parsing problems derive from Sp3Error (a ValueError, the input is bad);
interpolation problems derive from InterpolationError and are recoverable by
the caller, e.g. by choosing another epoch or treating it as "outside
coverage". End-of-stream is never an exception: readers return None.
"""
from typing import Optional


class Sp3Error(ValueError):
    """Base class for everything that can go wrong while reading an SP3 file."""


class Sp3HeaderError(Sp3Error):
    """
    The SP3 header is malformed or inconsistent.

    Attributes:
        section: HeaderSection where parsing stopped
        code: numeric error code (section base + detail)
    """

    def __init__(self, section, message: str, code: Optional[int] = None):
        self.section = section
        self.code = int(section) if code is None else code
        super().__init__(f"[{section.name}] {message} (code {self.code})")


class StartEpochMismatchError(Sp3HeaderError):
    """Declared (week, sow) or (MJD, fraction) disagree with the start epoch."""


class Sp3DataError(Sp3Error):
    """Base class for errors in the data section of the file."""


class Sp3RecordError(Sp3DataError):
    """A line of unexpected kind where an epoch/P/V/EOF line was expected."""

    def __init__(self, message: str, line: Optional[str] = None):
        self.line = line
        if line is not None:
            message = f"{message}: '{line}'"
        super().__init__(message)


class Sp3FieldError(Sp3DataError):
    """A fixed-column field could not be resolved."""

    def __init__(self, field: str, start: int, stop: int, line: str, reason: str = "invalid value"):
        self.field = field
        self.start = start
        self.stop = stop
        self.line = line
        super().__init__(f"{reason} for {field} (columns {start}-{stop - 1}): '{line}'")


class Sp3SeekError(Sp3Error):
    """Requested epoch lies before the first data block of the file."""


class SatelliteNotFoundError(Sp3Error):
    """Satellite is not declared in the SP3 header."""


class InterpolationError(RuntimeError):
    """Base class for interpolation failures."""


class InterpolationWindowError(InterpolationError):
    """Not enough samples around the requested epoch."""


class TooFewPointsLeftError(InterpolationWindowError):
    pass


class TooFewPointsRightError(InterpolationWindowError):
    pass


class NevilleError(InterpolationError):
    """Failure inside the Neville tableau."""


class NotEnoughSamplesError(NevilleError):
    pass


class CoincidentAbscissaeError(NevilleError):
    """Two sample abscissae are identical (to within roundoff)."""
