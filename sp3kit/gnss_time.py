import numpy as np


class GNSSTime:
    """Utility class for GNSS epoch arithmetic at nanosecond resolution.

    Notes:
    - Epochs are numpy.datetime64 values with unit 'ns'; differences are
      numpy.timedelta64 values with unit 'ns'.
    - No leap seconds are applied: an SP3 epoch is expressed in the file's own
      time system (normally GPS time), and the GPS week / MJD representations
      declared in the header are derived from that same scale.
    """

    GPS_EPOCH = np.datetime64("1980-01-06T00:00:00", "ns")
    MJD_EPOCH = np.datetime64("1858-11-17T00:00:00", "ns")

    NS_PER_SECOND = 1_000_000_000
    SECONDS_PER_DAY = 86400
    SECONDS_PER_WEEK = 7 * 86400

    @classmethod
    def from_calendar(cls, year: int, month: int, day: int,
                      hour: int = 0, minute: int = 0, seconds: float = 0.0) -> np.datetime64:
        """Build an epoch from calendar components.

        Hours, minutes and seconds are added as offsets to the date, so values
        such as minute=60 roll over into the next hour.

        Raises:
            ValueError: if (year, month, day) is not a valid date
        """
        date = np.datetime64(f"{int(year):04d}-{int(month):02d}-{int(day):02d}", "ns")
        nanos = int(round(float(seconds) * cls.NS_PER_SECOND))
        return (date
                + np.timedelta64(int(hour) * 3600 + int(minute) * 60, "s")
                + np.timedelta64(nanos, "ns"))

    @classmethod
    def as_epoch(cls, t) -> np.datetime64:
        """Coerce a datetime64/datetime/ISO string to datetime64[ns]."""
        if isinstance(t, np.datetime64):
            return t.astype("datetime64[ns]")
        if hasattr(t, "tzinfo") and t.tzinfo is not None:
            t = t.replace(tzinfo=None)
        return np.datetime64(t, "ns")

    @classmethod
    def to_calendar(cls, t) -> tuple:
        """Return (year, month, day, hour, minute, fractional seconds)."""
        t = cls.as_epoch(t)
        day = t.astype("datetime64[D]")
        date = day.astype(object)
        nanos = int((t - day.astype("datetime64[ns]")).astype(np.int64))
        hour, rem = divmod(nanos, 3600 * cls.NS_PER_SECOND)
        minute, rem = divmod(rem, 60 * cls.NS_PER_SECOND)
        return date.year, date.month, date.day, hour, minute, rem / cls.NS_PER_SECOND

    @classmethod
    def to_gps_week_sow(cls, t) -> (int, float):
        """Convert an epoch to GPS week and seconds-of-week."""
        nanos = int((cls.as_epoch(t) - cls.GPS_EPOCH).astype(np.int64))
        week, rem = divmod(nanos, cls.SECONDS_PER_WEEK * cls.NS_PER_SECOND)
        return week, rem / cls.NS_PER_SECOND

    @classmethod
    def to_mjd(cls, t) -> (int, float):
        """Convert an epoch to (Modified Julian Day, fraction of day)."""
        nanos = int((cls.as_epoch(t) - cls.MJD_EPOCH).astype(np.int64))
        mjd, rem = divmod(nanos, cls.SECONDS_PER_DAY * cls.NS_PER_SECOND)
        return mjd, rem / (cls.SECONDS_PER_DAY * cls.NS_PER_SECOND)

    @classmethod
    def seconds_between(cls, t, t0) -> float:
        """Return t - t0 in (fractional) seconds."""
        nanos = int((cls.as_epoch(t) - cls.as_epoch(t0)).astype(np.int64))
        return nanos / cls.NS_PER_SECOND

    @classmethod
    def to_timedelta(cls, seconds) -> np.timedelta64:
        """Seconds (float) or any timedelta64 to timedelta64[ns]."""
        if isinstance(seconds, np.timedelta64):
            return seconds.astype("timedelta64[ns]")
        return np.timedelta64(int(round(float(seconds) * cls.NS_PER_SECOND)), "ns")

    @classmethod
    def format(cls, t) -> str:
        """ISO representation with microsecond precision."""
        return str(np.datetime_as_string(cls.as_epoch(t), unit="us"))


__all__ = ["GNSSTime"]
