"""
SP3-c / SP3-d header parsing.

The header is a strict sequence of sections:

    #cP2020  6 15 12 30  0.00000000      96 ORBIT IGS14 FIT  IGS   <- line 1
    ## 2110 131400.00000000   900.00000000 59015 0.5208333333333   <- line 2
    +   32   G01G02G03...                                         <- >= 5 sat. id lines
    ++         2  2  2...                                         <- >= 5 accuracy lines
    %c G  cc GPS ccc cccc ...                                     <- 2 lines
    %f  1.2500000  1.025000000  0.00000000000  0.000000000000000  <- 1 or 2 lines
    %i    0    0    0    0      0      0      0      0         0  <- 2 lines
    /* free comments                                              <- 0 or more

Each section that does not match raises Sp3HeaderError tagged with its
HeaderSection; codes are section base + detail.
"""
import logging
from enum import IntEnum

from sp3kit.data_models import Sp3Header
from sp3kit.errors import Sp3FieldError, Sp3HeaderError, StartEpochMismatchError
from sp3kit.global_config import ReaderSettings, get_reader_settings
from sp3kit.gnss_time import GNSSTime
from sp3kit.satellite import SatelliteId, SAT_ID_CHARS
from sp3kit.sp3_lines import Column, LineStream, read_char, read_float, read_int, read_text

logger = logging.getLogger(__name__)


class HeaderSection(IntEnum):
    FIRST_LINE = 10
    SECOND_LINE = 20
    SATELLITE_IDS = 30
    ACCURACY = 40
    TIME_SYSTEM = 50
    FLOATING_BASES = 60
    INT_PARAMETERS = 70
    COMMENTS = 80


SUPPORTED_VERSIONS = ("c", "d")

# Line 1
H1_YEAR = Column(3, 7, "year")
H1_MONTH = Column(8, 10, "month")
H1_DAY = Column(11, 13, "day of month")
H1_HOUR = Column(14, 16, "hour")
H1_MINUTE = Column(17, 19, "minute")
H1_SECONDS = Column(20, 31, "seconds")
H1_NUM_EPOCHS = Column(32, 39, "number of epochs")
H1_COORD_SYS = Column(46, 51, "coordinate system")
H1_ORBIT_TYPE = Column(52, 55, "orbit type")
H1_AGENCY = Column(56, 60, "agency")

# Line 2
H2_GPS_WEEK = Column(3, 7, "GPS week")
H2_SOW = Column(8, 23, "seconds of week")
H2_INTERVAL = Column(24, 38, "epoch interval")
H2_MJD = Column(39, 44, "modified julian day")
H2_FRACTIONAL_DAY = Column(45, 60, "fractional day")

# Satellite id lines
SAT_COUNT = Column(3, 6, "number of satellites")
SAT_ID_START = 9
SAT_IDS_PER_LINE = 17
MIN_SAT_ID_LINES = 5

MIN_ACCURACY_LINES = 5

# %c lines
FILE_TYPE = Column(3, 5, "file type")
TIME_SYSTEM = Column(9, 12, "time system")

# %f lines
POS_BASE = Column(3, 13, "position/velocity std. dev. base")
CLK_BASE = Column(14, 26, "clock/clock-rate std. dev. base")


def _expect(line, marker: str, section: HeaderSection, code: int, what: str) -> str:
    if line is None:
        raise Sp3HeaderError(section, f"unexpected end of file; expected {what}", code)
    if not line.startswith(marker):
        raise Sp3HeaderError(section, f"expected {what} starting with '{marker}', found '{line}'", code)
    return line


def _header_int(line: str, col: Column, section: HeaderSection, code: int, nonzero: bool = False) -> int:
    try:
        value = read_int(line, col)
    except Sp3FieldError as e:
        raise Sp3HeaderError(section, str(e), code) from e
    if nonzero and value == 0:
        raise Sp3HeaderError(section, f"{col.name} must be non-zero: '{line}'", code)
    return value


def _header_float(line: str, col: Column, section: HeaderSection, code: int) -> float:
    try:
        return read_float(line, col)
    except Sp3FieldError as e:
        raise Sp3HeaderError(section, str(e), code) from e


def _read_first_line(line) -> Sp3Header:
    section = HeaderSection.FIRST_LINE
    _expect(line, "#", section, 10, "version line")
    version = read_char(line, 1)
    if version not in SUPPORTED_VERSIONS:
        raise Sp3HeaderError(section, f"unsupported SP3 version '{version}'", 10)

    year = _header_int(line, H1_YEAR, section, 11, nonzero=True)
    month = _header_int(line, H1_MONTH, section, 12, nonzero=True)
    dom = _header_int(line, H1_DAY, section, 13, nonzero=True)
    hour = _header_int(line, H1_HOUR, section, 14)
    minute = _header_int(line, H1_MINUTE, section, 15)
    sec = _header_float(line, H1_SECONDS, section, 17)
    num_epochs = _header_int(line, H1_NUM_EPOCHS, section, 16, nonzero=True)

    try:
        start_epoch = GNSSTime.from_calendar(year, month, dom, hour, minute, sec)
    except ValueError as e:
        raise Sp3HeaderError(section, f"invalid start date: {e}", 13) from e

    return Sp3Header(
        version=version,
        data_type=read_char(line, 2),
        start_epoch=start_epoch,
        num_epochs=num_epochs,
        coordinate_system=read_text(line, H1_COORD_SYS),
        orbit_type=read_text(line, H1_ORBIT_TYPE),
        agency=read_text(line, H1_AGENCY),
    )


def _read_second_line(line, header: Sp3Header, settings: ReaderSettings) -> None:
    section = HeaderSection.SECOND_LINE
    _expect(line, "##", section, 20, "GPS week line")

    header.gps_week = _header_int(line, H2_GPS_WEEK, section, 21, nonzero=True)
    header.seconds_of_week = _header_float(line, H2_SOW, section, 26)
    week, sow = GNSSTime.to_gps_week_sow(header.start_epoch)
    if week != header.gps_week or abs(sow - header.seconds_of_week) > settings.sow_tolerance:
        logger.error(
            f"Computed GPST is ({week}, {sow:.12f}), read is ({header.gps_week}, "
            f"{header.seconds_of_week:.12f}) diff is {abs(sow - header.seconds_of_week):.1e} [sec]")
        raise StartEpochMismatchError(
            section, "start epoch does not match the declared GPS week / seconds of week", 22)

    interval = _header_float(line, H2_INTERVAL, section, 25)
    header.interval = GNSSTime.to_timedelta(interval)

    header.mjd = _header_int(line, H2_MJD, section, 23, nonzero=True)
    header.fractional_day = _header_float(line, H2_FRACTIONAL_DAY, section, 27)
    mjd, fday = GNSSTime.to_mjd(header.start_epoch)
    if mjd != header.mjd or abs(fday - header.fractional_day) > settings.fractional_day_tolerance:
        logger.error(
            f"Computed MJD is ({mjd}, {fday:.13f}), read is ({header.mjd}, {header.fractional_day:.13f})")
        raise StartEpochMismatchError(
            section, "start epoch does not match the declared MJD / fractional day", 24)


def _read_satellite_ids(lines: LineStream, header: Sp3Header) -> None:
    section = HeaderSection.SATELLITE_IDS
    line = _expect(lines.readline(), "+ ", section, 30, "satellite id line")
    num_sats = _header_int(line, SAT_COUNT, section, 31)
    if num_sats <= 0:
        raise Sp3HeaderError(section, f"invalid number of satellites: '{line}'", 31)

    sats = []
    lines_read = 1
    while True:
        for k in range(SAT_IDS_PER_LINE):
            if len(sats) == num_sats:
                break
            start = SAT_ID_START + k * SAT_ID_CHARS
            sid = line[start:start + SAT_ID_CHARS]
            if len(sid) < SAT_ID_CHARS or not sid.strip():
                raise Sp3HeaderError(section, f"missing id for satellite #{len(sats) + 1}: '{line}'", 32)
            sats.append(SatelliteId(sid))
        if len(sats) == num_sats and lines_read >= MIN_SAT_ID_LINES:
            break
        line = _expect(lines.readline(), "+ ", section, 30, "satellite id line")
        lines_read += 1

    header.num_sats = num_sats
    header.satellites = sats


def _read_accuracy_lines(lines: LineStream, settings: ReaderSettings) -> None:
    section = HeaderSection.ACCURACY
    _expect(lines.readline(), "++", section, 40, "satellite accuracy line")
    count = 1
    while True:
        nxt = lines.peek()
        if nxt is None or not nxt.startswith("++"):
            break
        lines.readline()
        count += 1
        if count >= settings.max_header_lines:
            raise Sp3HeaderError(section, "too many satellite accuracy lines", 41)
    if count < MIN_ACCURACY_LINES:
        raise Sp3HeaderError(
            section, f"expected at least {MIN_ACCURACY_LINES} accuracy lines, found {count}", 42)


def _read_time_system(lines: LineStream, header: Sp3Header) -> None:
    section = HeaderSection.TIME_SYSTEM
    line = _expect(lines.readline(), "%c", section, 50, "file/time system line")
    header.file_type = read_text(line, FILE_TYPE)
    header.time_system = read_text(line, TIME_SYSTEM)
    _expect(lines.readline(), "%c", section, 51, "second '%c' line")


def _read_floating_bases(lines: LineStream, header: Sp3Header) -> None:
    section = HeaderSection.FLOATING_BASES
    line = _expect(lines.readline(), "%f", section, 60, "floating point base line")
    header.pos_base = _header_float(line, POS_BASE, section, 61)
    header.clk_base = _header_float(line, CLK_BASE, section, 61)
    if header.pos_base <= 0e0 or header.clk_base <= 0e0:
        raise Sp3HeaderError(section, f"std. dev. bases must be positive: '{line}'", 61)
    # the second '%f' line carries nothing we use
    nxt = lines.peek()
    if nxt is not None and nxt.startswith("%f"):
        lines.readline()


def _read_int_parameters(lines: LineStream) -> None:
    for i in range(2):
        _expect(lines.readline(), "%i", HeaderSection.INT_PARAMETERS, 70 + i, "'%i' line")


def _read_comments(lines: LineStream, header: Sp3Header, settings: ReaderSettings) -> None:
    section = HeaderSection.COMMENTS
    while True:
        nxt = lines.peek()
        if nxt is None or not nxt.startswith("/"):
            break
        line = _expect(lines.readline(), "/*", section, 80, "comment line")
        header.comments.append(line[2:].strip())
        if len(header.comments) > settings.max_header_lines:
            raise Sp3HeaderError(section, "too many comment lines", 81)


def read_header(lines: LineStream, settings: ReaderSettings = None) -> Sp3Header:
    """
    Parse an SP3 header from the current position of the stream (normally its
    very beginning). On return, the stream sits at the first epoch line.

    Args:
        lines: LineStream positioned at the '#' version line
        settings: ReaderSettings; the global ones if not given

    Returns:
        Sp3Header

    Raises:
        Sp3HeaderError: (or StartEpochMismatchError) on any malformed section
    """
    settings = settings or get_reader_settings()
    header = _read_first_line(lines.readline())
    _read_second_line(lines.readline(), header, settings)
    _read_satellite_ids(lines, header)
    _read_accuracy_lines(lines, settings)
    _read_time_system(lines, header)
    _read_floating_bases(lines, header)
    _read_int_parameters(lines)
    _read_comments(lines, header, settings)
    return header
