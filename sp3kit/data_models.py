"""
Data models for SP3 header metadata, per-epoch satellite records and
interpolation results.
"""
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from sp3kit.gnss_time import GNSSTime
from sp3kit.satellite import SatelliteId
from sp3kit.sp3_flag import Sp3Event, Sp3Flag


@dataclass
class Sp3DataBlock:
    """
    Records of one satellite at one epoch.

    Units:
      state:      [X, Y, Z] km, clock us, [Vx, Vy, Vz] dm/s, clock-rate 1e-4 us/s
      state_sdev: [X, Y, Z] mm, clock ps, [Vx, Vy, Vz] 1e-4 mm/s, clock-rate 1e-4 ps/s
    Check `flag` to see which values were actually resolved.
    """
    t: Optional[np.datetime64] = None
    state: np.ndarray = field(default_factory=lambda: np.zeros(8))
    state_sdev: np.ndarray = field(default_factory=lambda: np.zeros(8))
    flag: Sp3Flag = field(default_factory=Sp3Flag)

    @property
    def position(self) -> np.ndarray:
        return self.state[0:3]

    @property
    def clock(self) -> float:
        return float(self.state[3])

    @property
    def velocity(self) -> np.ndarray:
        return self.state[4:7]

    @property
    def clock_rate(self) -> float:
        return float(self.state[7])

    def has_position(self) -> bool:
        return not self.flag.is_set(Sp3Event.ABSENT_POSITION)

    def has_velocity(self) -> bool:
        return not self.flag.is_set(Sp3Event.ABSENT_VELOCITY)

    def copy(self) -> "Sp3DataBlock":
        return Sp3DataBlock(t=self.t, state=self.state.copy(),
                            state_sdev=self.state_sdev.copy(), flag=self.flag.copy())


@dataclass
class Sp3Header:
    """
    Metadata resolved from an SP3 header.
    """
    version: str                    # 'c' or 'd'
    data_type: str                  # 'P' (positions) or 'V' (positions + velocities)
    start_epoch: np.datetime64
    num_epochs: int
    coordinate_system: str
    orbit_type: str
    agency: str

    gps_week: int = 0
    seconds_of_week: float = 0.0
    mjd: int = 0
    fractional_day: float = 0.0
    interval: np.timedelta64 = field(default_factory=lambda: np.timedelta64(0, "ns"))

    num_sats: int = 0
    satellites: List[SatelliteId] = field(default_factory=list)

    file_type: str = ""
    time_system: str = ""

    # floating point base for position (mm, 1e-4 mm/s) and clock (ps, 1e-4 ps/s) std. dev.
    pos_base: float = 0.0
    clk_base: float = 0.0

    comments: List[str] = field(default_factory=list)

    @property
    def interval_seconds(self) -> float:
        return int(self.interval.astype(np.int64)) / GNSSTime.NS_PER_SECOND

    def summary(self) -> str:
        """Human readable dump of the header members."""
        lines = [
            f"Version      : {self.version} ({self.data_type})",
            f"Start Epoch  : {GNSSTime.format(self.start_epoch)}",
            f"GPS Week/SoW : {self.gps_week} {self.seconds_of_week:.8f}",
            f"MJD          : {self.mjd} {self.fractional_day:.13f}",
            f"# Epochs     : {self.num_epochs}",
            f"Interval(sec): {self.interval_seconds:.3f}",
            f"Coordinate S : {self.coordinate_system}",
            f"Orbit Type   : {self.orbit_type}",
            f"Agency       : {self.agency}",
            f"Time System  : {self.time_system}",
            f"# Satellites : {self.num_sats}",
            f"Satellites   : {' '.join(str(s) for s in self.satellites)}",
        ]
        return "\n".join(lines)


@dataclass
class InterpolationResult:
    """
    Satellite state interpolated at one epoch.

    position / position_error in km; velocity / velocity_error in dm/s (only
    filled when velocity was requested).
    """
    epoch: np.datetime64
    position: np.ndarray
    position_error: np.ndarray
    velocity: Optional[np.ndarray] = None
    velocity_error: Optional[np.ndarray] = None
    num_points: int = 0
