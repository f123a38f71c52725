"""
Builders for small SP3-c files used by the tests.

Satellite #i of a file moves along a quadratic in hours since the start
epoch, shifted by 1000 km per satellite index, so values read back can be
checked exactly.
"""
import gzip
import os

from sp3kit.gnss_time import GNSSTime

START = (2020, 6, 15, 12, 30, 0.0)
START_EPOCH = GNSSTime.from_calendar(*START)
INTERVAL = 900.0

# header line indexes, for up to 85 satellites
LINE1, LINE2 = 0, 1
PERCENT_C = 12
PERCENT_F = 14
PERCENT_I = 16


def position_at(hours, index=0):
    return (15000.0 + 300.0 * hours - 20.0 * hours ** 2 + 1000.0 * index,
            -12000.0 + 150.0 * hours + 10.0 * hours ** 2,
            20000.0 - 50.0 * hours + 5.0 * hours ** 2)


def velocity_at(hours, index=0):
    return (30000.0 - 4000.0 * hours + 100.0 * index,
            15000.0 + 2000.0 * hours,
            -5000.0 + 1000.0 * hours)


def clock_at(hours, index=0):
    return 100.0 + 0.5 * hours + index


def _calendar(t):
    y, mo, d, h, mi, sec = GNSSTime.to_calendar(t)
    return f"{y:4d} {mo:2d} {d:2d} {h:2d} {mi:2d} {sec:11.8f}"


def first_line(start=START_EPOCH, num_epochs=5, version="c", data_type="P"):
    return f"#{version}{data_type}{_calendar(start)} {num_epochs:7d} ORBIT IGS14 FIT  IGS"


def second_line(start=START_EPOCH, interval=INTERVAL, week=None, sow=None, mjd=None, fday=None):
    cweek, csow = GNSSTime.to_gps_week_sow(start)
    cmjd, cfday = GNSSTime.to_mjd(start)
    week = cweek if week is None else week
    sow = csow if sow is None else sow
    mjd = cmjd if mjd is None else mjd
    fday = cfday if fday is None else fday
    return f"## {week:4d} {sow:15.8f} {interval:14.8f} {mjd:5d} {fday:15.13f}"


def satellite_lines(sats):
    ids = list(sats)
    lines = []
    for k in range(0, max(len(ids), 1), 17):
        chunk = ids[k:k + 17]
        prefix = f"+  {len(ids):3d}   " if k == 0 else "+        "
        lines.append(prefix + "".join(chunk) + "  0" * (17 - len(chunk)))
    while len(lines) < 5:
        lines.append("+        " + "  0" * 17)
    return lines


def accuracy_lines(count=5):
    return ["++       " + "  2" * 17 for _ in range(count)]


def header(sats=("G01",), start=START_EPOCH, num_epochs=5, interval=INTERVAL, version="c",
           data_type="P", pos_base=1.25, clk_base=1.025, comments=("sp3kit test file",), **second):
    lines = [first_line(start, num_epochs, version, data_type),
             second_line(start, interval, **second)]
    lines += satellite_lines(sats)
    lines += accuracy_lines()
    lines += ["%c M  cc GPS ccc cccc cccc cccc cccc ccccc ccccc ccccc ccccc",
              "%c cc cc ccc ccc cccc cccc cccc cccc ccccc ccccc ccccc ccccc",
              f"%f {pos_base:10.7f} {clk_base:12.9f}  0.00000000000  0.000000000000000",
              "%f  0.0000000  0.000000000  0.00000000000  0.000000000000000",
              "%i    0    0    0    0      0      0      0      0         0",
              "%i    0    0    0    0      0      0      0      0         0"]
    lines += [f"/* {c}" for c in comments]
    return lines


def epoch_line(t):
    return f"*  {_calendar(t)}"


def _exponent(value, width):
    return " " * width if value is None else f"{value:{width}d}"


def _record(kind, sat, xyz, clock, sdev=None, events="    "):
    line = f"{kind}{sat}{xyz[0]:14.6f}{xyz[1]:14.6f}{xyz[2]:14.6f}{clock:14.6f}"
    if sdev is None and not events.strip():
        return line
    sdev = sdev or (None, None, None, None)
    line += (f" {_exponent(sdev[0], 2)} {_exponent(sdev[1], 2)} {_exponent(sdev[2], 2)}"
             f" {_exponent(sdev[3], 3)} ")
    return line + events[0:2] + "  " + events[2:4]


def p_line(sat, xyz, clock, sdev=None, clock_event=False, clock_prediction=False,
           maneuver=False, orbit_prediction=False):
    events = (("E" if clock_event else " ") + ("P" if clock_prediction else " ")
              + ("M" if maneuver else " ") + ("P" if orbit_prediction else " "))
    return _record("P", sat, xyz, clock, sdev, events)


def v_line(sat, vel, clock_rate, sdev=None):
    return _record("V", sat, vel, clock_rate, sdev)


def epochs(count=5, interval=INTERVAL, start=START_EPOCH):
    return [start + GNSSTime.to_timedelta(k * interval) for k in range(count)]


def data_lines(sats=("G01",), count=5, interval=INTERVAL, velocity=False, start=START_EPOCH):
    lines = []
    for t in epochs(count, interval, start):
        lines.append(epoch_line(t))
        hours = GNSSTime.seconds_between(t, start) / 3600e0
        for i, sat in enumerate(sats):
            lines.append(p_line(sat, position_at(hours, i), clock_at(hours, i)))
            if velocity:
                lines.append(v_line(sat, velocity_at(hours, i), 0.1))
    return lines


def orbit_lines(sats=("G01",), count=5, interval=INTERVAL, velocity=False):
    """A complete, valid file: header, count epochs and the EOF line."""
    lines = header(sats, num_epochs=count, interval=interval, data_type="V" if velocity else "P")
    lines += data_lines(sats, count, interval, velocity)
    lines.append("EOF")
    return lines


def write_sp3(directory, lines, name="test.sp3"):
    path = os.path.join(directory, name)
    text = "\n".join(lines) + "\n"
    if name.endswith(".gz"):
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(text)
    else:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    return path


def seconds_after_start(seconds):
    return START_EPOCH + GNSSTime.to_timedelta(seconds)
