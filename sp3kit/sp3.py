"""
Sequential reader for SP3-c / SP3-d precise ephemeris files.

The header is parsed once on construction; afterwards the reader is a cursor
over the data section. Each call to get_next_data_block consumes one epoch
(the '*' line and every P/V/EP/EV record following it) and returns the
records of one satellite, or None once the 'EOF' line is reached.
"""
import logging
from typing import Iterator, List, Optional

import numpy as np

from sp3kit.data_models import Sp3DataBlock, Sp3Header
from sp3kit.errors import Sp3FieldError, Sp3RecordError
from sp3kit.global_config import ReaderSettings
from sp3kit.gnss_time import GNSSTime
from sp3kit.satellite import SatelliteId
from sp3kit.sp3_flag import Sp3Event
from sp3kit.sp3_header import read_header
from sp3kit.sp3_lines import Column, LineStream, is_blank, open_sp3, read_char, read_float, read_int

logger = logging.getLogger(__name__)

# Epoch line, '*  2020  6 15 12 30  0.00000000'
EPOCH_YEAR = Column(3, 7, "epoch year")
EPOCH_MONTH = Column(8, 10, "epoch month")
EPOCH_DAY = Column(11, 13, "epoch day of month")
EPOCH_HOUR = Column(14, 16, "epoch hour")
EPOCH_MINUTE = Column(17, 19, "epoch minute")
EPOCH_SECONDS = Column(20, 31, "epoch seconds")

# Position ('P') and velocity ('V') records share one layout
REC_SATELLITE = Column(1, 4, "satellite id")
REC_X = Column(4, 18, "x-coordinate")
REC_Y = Column(18, 32, "y-coordinate")
REC_Z = Column(32, 46, "z-coordinate")
REC_CLOCK = Column(46, 60, "clock")
REC_X_SDEV = Column(61, 63, "x-sdev exponent")
REC_Y_SDEV = Column(64, 66, "y-sdev exponent")
REC_Z_SDEV = Column(67, 69, "z-sdev exponent")
REC_CLOCK_SDEV = Column(70, 73, "clock-sdev exponent")

# Event flag characters of 'P' records
CLOCK_EVENT_FLAG = 74
CLOCK_PREDICTION_FLAG = 75
MANEUVER_FLAG = 78
ORBIT_PREDICTION_FLAG = 79

# Bad or absent clock values are written as 999999.999999
MISSING_CLOCK = 999999e0


class Sp3Reader:
    """
    Reader for an SP3 file (plain text, or gzip-compressed if the name ends
    with '.gz').

    Usage:
        with Sp3Reader("igs21100.sp3") as sp3:
            block = sp3.get_next_data_block("G01")
            while block is not None:
                ...
                block = sp3.get_next_data_block("G01")

    Raises:
        Sp3HeaderError: on construction, if the header is invalid; the file
            is closed before raising
    """

    def __init__(self, filename, settings: ReaderSettings = None):
        self.filename = str(filename)
        self._lines = LineStream(open_sp3(filename))
        try:
            self._header = read_header(self._lines, settings)
        except Exception:
            self._lines.close()
            raise
        # start of the data section, the first epoch line
        self._end_of_head = self._lines.tell()
        logger.debug(f"Parsed SP3 header of {self.filename}: {self._header.num_sats} satellites, "
                     f"{self._header.num_epochs} epochs")

    # ------------------------------------------------------------------
    # Header accessors
    # ------------------------------------------------------------------
    @property
    def header(self) -> Sp3Header:
        return self._header

    @property
    def version(self) -> str:
        return self._header.version

    @property
    def data_type(self) -> str:
        return self._header.data_type

    @property
    def start_epoch(self) -> np.datetime64:
        return self._header.start_epoch

    @property
    def interval(self) -> np.timedelta64:
        return self._header.interval

    @property
    def num_epochs(self) -> int:
        return self._header.num_epochs

    @property
    def time_system(self) -> str:
        return self._header.time_system

    @property
    def coordinate_system(self) -> str:
        return self._header.coordinate_system

    @property
    def orbit_type(self) -> str:
        return self._header.orbit_type

    @property
    def agency(self) -> str:
        return self._header.agency

    @property
    def num_sats(self) -> int:
        return self._header.num_sats

    def satellite_list(self) -> List[SatelliteId]:
        """Satellites in declaration order."""
        return list(self._header.satellites)

    def has_satellite(self, satellite) -> bool:
        """
        True if the satellite is declared in the header. A plain string must
        match a declared 3-character id exactly.
        """
        return any(s == satellite for s in self._header.satellites)

    # ------------------------------------------------------------------
    # Data section
    # ------------------------------------------------------------------
    def rewind(self) -> None:
        """Move the cursor back to the first epoch line."""
        self._lines.seek(self._end_of_head)

    def get_next_data_block(self, satellite) -> Optional[Sp3DataBlock]:
        """
        Read the next epoch and return the records of the given satellite.

        The block starts out with position, clock, velocity and clock-rate all
        marked absent; only the satellite's own P/V records clear these flags.
        A satellite that has no record at this epoch (or is not in the file at
        all) therefore gets a block with every value absent.

        Returns:
            Sp3DataBlock, or None when the 'EOF' line is reached. Once at the
            end, every further call returns None as well.

        Raises:
            Sp3RecordError: on an unexpected line, or if the file ends
                without an 'EOF' line
            Sp3FieldError: if a numeric field cannot be resolved
        """
        target = satellite.id if isinstance(satellite, SatelliteId) else str(satellite)

        pos = self._lines.tell()
        line = self._lines.readline()
        if line is None:
            raise Sp3RecordError("unexpected end of file, expected an epoch line or 'EOF'")
        if line.startswith("EOF"):
            # stay in front of 'EOF' so the end is reported again
            self._lines.seek(pos)
            return None
        if not line.startswith("* "):
            raise Sp3RecordError("expected an epoch line", line)

        block = Sp3DataBlock(t=self._resolve_epoch_line(line))
        block.flag.reset_to_pessimistic_defaults()

        while True:
            pos = self._lines.tell()
            line = self._lines.readline()
            if line is None:
                raise Sp3RecordError("unexpected end of file, missing 'EOF' line")
            if line.startswith("*") or line.startswith("EOF"):
                self._lines.seek(pos)
                break
            if line.startswith("EP") or line.startswith("EV"):
                logger.debug(f"Skipping correlation record: {line}")
                continue
            if line.startswith("P"):
                # other satellites are skipped without resolving any number
                if line[REC_SATELLITE.start:REC_SATELLITE.stop] == target:
                    self._resolve_position_line(line, block)
                continue
            if line.startswith("V"):
                if line[REC_SATELLITE.start:REC_SATELLITE.stop] == target:
                    self._resolve_velocity_line(line, block)
                continue
            raise Sp3RecordError("unexpected record in data section", line)

        return block

    def peek_next_epoch(self) -> Optional[np.datetime64]:
        """
        Epoch of the next data block, without moving the cursor.

        Returns:
            The epoch, or None if the next line is 'EOF'
        """
        pos = self._lines.tell()
        try:
            line = self._lines.readline()
            if line is None:
                raise Sp3RecordError("unexpected end of file, expected an epoch line or 'EOF'")
            if line.startswith("EOF"):
                return None
            if not line.startswith("* "):
                raise Sp3RecordError("expected an epoch line", line)
            return self._resolve_epoch_line(line)
        finally:
            self._lines.seek(pos)

    def data_blocks(self, satellite) -> Iterator[Sp3DataBlock]:
        """Rewind, then yield every data block of the satellite."""
        self.rewind()
        block = self.get_next_data_block(satellite)
        while block is not None:
            yield block
            block = self.get_next_data_block(satellite)

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------
    def close(self) -> None:
        if not self._lines.closed:
            self._lines.close()

    @property
    def closed(self) -> bool:
        return self._lines.closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self):
        return (f"Sp3Reader('{self.filename}', version={self.version}, "
                f"sats={self.num_sats}, epochs={self.num_epochs})")

    # ------------------------------------------------------------------
    # Record resolvers
    # ------------------------------------------------------------------
    @staticmethod
    def _resolve_epoch_line(line: str) -> np.datetime64:
        year = read_int(line, EPOCH_YEAR)
        month = read_int(line, EPOCH_MONTH)
        dom = read_int(line, EPOCH_DAY)
        hour = read_int(line, EPOCH_HOUR)
        minute = read_int(line, EPOCH_MINUTE)
        sec = read_float(line, EPOCH_SECONDS)
        try:
            return GNSSTime.from_calendar(year, month, dom, hour, minute, sec)
        except ValueError:
            raise Sp3FieldError("epoch date", EPOCH_YEAR.start, EPOCH_DAY.stop, line, "invalid date") from None

    def _resolve_state_line(self, line: str, block: Sp3DataBlock, offset: int,
                            absent_xyz: Sp3Event, absent_clock: Sp3Event,
                            has_xyz_sdev: Sp3Event, has_clock_sdev: Sp3Event) -> None:
        xyz = [read_float(line, col) for col in (REC_X, REC_Y, REC_Z)]
        clock = read_float(line, REC_CLOCK)

        block.state[offset:offset + 3] = xyz
        block.state[offset + 3] = clock

        if any(v == 0e0 for v in xyz):
            block.flag.set(absent_xyz)
        else:
            block.flag.clear(absent_xyz)
        if clock >= MISSING_CLOCK:
            block.flag.set(absent_clock)
        else:
            block.flag.clear(absent_clock)

        # std. dev. are given as exponents of the header's floating point bases
        xyz_sdev_cols = (REC_X_SDEV, REC_Y_SDEV, REC_Z_SDEV)
        for k, col in enumerate(xyz_sdev_cols):
            if not is_blank(line, col):
                block.state_sdev[offset + k] = self._header.pos_base ** read_int(line, col)
        if all(not is_blank(line, col) for col in xyz_sdev_cols):
            block.flag.set(has_xyz_sdev)
        if not is_blank(line, REC_CLOCK_SDEV):
            block.state_sdev[offset + 3] = self._header.clk_base ** read_int(line, REC_CLOCK_SDEV)
            block.flag.set(has_clock_sdev)

    def _resolve_position_line(self, line: str, block: Sp3DataBlock) -> None:
        self._resolve_state_line(line, block, 0,
                                 Sp3Event.ABSENT_POSITION, Sp3Event.ABSENT_CLOCK,
                                 Sp3Event.HAS_POSITION_STDDEV, Sp3Event.HAS_CLOCK_STDDEV)
        if read_char(line, CLOCK_EVENT_FLAG) == "E":
            block.flag.set(Sp3Event.CLOCK_EVENT)
        if read_char(line, CLOCK_PREDICTION_FLAG) == "P":
            block.flag.set(Sp3Event.CLOCK_PREDICTION)
        if read_char(line, MANEUVER_FLAG) == "M":
            block.flag.set(Sp3Event.MANEUVER)
        if read_char(line, ORBIT_PREDICTION_FLAG) == "P":
            block.flag.set(Sp3Event.ORBIT_PREDICTION)

    def _resolve_velocity_line(self, line: str, block: Sp3DataBlock) -> None:
        self._resolve_state_line(line, block, 4,
                                 Sp3Event.ABSENT_VELOCITY, Sp3Event.ABSENT_CLOCK_RATE,
                                 Sp3Event.HAS_VELOCITY_STDDEV, Sp3Event.HAS_CLOCK_RATE_STDDEV)


__all__ = ["Sp3Reader"]
