"""
sp3kit - SP3-c/d precise ephemeris reading and satellite state interpolation.
"""

from sp3kit.data_models import InterpolationResult, Sp3DataBlock, Sp3Header
from sp3kit.errors import (
    CoincidentAbscissaeError,
    InterpolationError,
    InterpolationWindowError,
    NevilleError,
    NotEnoughSamplesError,
    SatelliteNotFoundError,
    Sp3DataError,
    Sp3Error,
    Sp3FieldError,
    Sp3HeaderError,
    Sp3RecordError,
    Sp3SeekError,
    StartEpochMismatchError,
    TooFewPointsLeftError,
    TooFewPointsRightError,
)
from sp3kit.gnss_time import GNSSTime
from sp3kit.neville import neville_interpolation, neville_interpolation3
from sp3kit.satellite import SAT_ID_CHARS, SatelliteId
from sp3kit.sp3 import Sp3Reader
from sp3kit.sp3_flag import Sp3Event, Sp3Flag
from sp3kit.sp3_header import HeaderSection
from sp3kit.sp3_iterator import Sp3Iterator
from sp3kit.sv_interpolate import SvInterpolator

__version__ = "0.1.0"

__all__ = [
    "Sp3Reader",
    "Sp3Iterator",
    "SvInterpolator",
    "Sp3DataBlock",
    "Sp3Header",
    "InterpolationResult",
    "SatelliteId",
    "SAT_ID_CHARS",
    "Sp3Event",
    "Sp3Flag",
    "HeaderSection",
    "GNSSTime",
    "neville_interpolation",
    "neville_interpolation3",
    "Sp3Error",
    "Sp3HeaderError",
    "StartEpochMismatchError",
    "Sp3DataError",
    "Sp3RecordError",
    "Sp3FieldError",
    "Sp3SeekError",
    "SatelliteNotFoundError",
    "InterpolationError",
    "InterpolationWindowError",
    "TooFewPointsLeftError",
    "TooFewPointsRightError",
    "NevilleError",
    "NotEnoughSamplesError",
    "CoincidentAbscissaeError",
]
