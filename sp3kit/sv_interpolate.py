"""
Satellite state at arbitrary epochs, interpolated from SP3 records.

SvInterpolator reads the whole time series of one satellite from an
Sp3Reader and answers interpolate_at queries with Neville's algorithm over a
window of records around the requested epoch. Queries are expected to advance
monotonically (e.g. dense re-sampling), so the index found last is checked
before falling back to a binary search.
"""
import logging
import math
from typing import List, Optional

import numpy as np

from sp3kit.data_models import InterpolationResult, Sp3DataBlock
from sp3kit.errors import (InterpolationWindowError, SatelliteNotFoundError, Sp3RecordError,
                           TooFewPointsLeftError, TooFewPointsRightError)
from sp3kit.global_config import get_interpolation_settings
from sp3kit.gnss_time import GNSSTime
from sp3kit.neville import neville_interpolation3
from sp3kit.satellite import SatelliteId
from sp3kit.sp3 import Sp3Reader
from sp3kit.sp3_flag import Sp3Event

logger = logging.getLogger(__name__)


class SvInterpolator:
    """
    Interpolate position (and optionally velocity) of one satellite.

    Args:
        satellite: satellite id, must be declared in the SP3 header
        sp3: Sp3Reader; it is rewound and read through on construction
        max_lookaround: use records up to this far from the requested epoch,
            on each side (seconds or timedelta64); global default if None
        min_points_per_side: records required on each side of the requested
            epoch; global default if None

    Raises:
        SatelliteNotFoundError: if the satellite is not in the SP3 file
        Sp3Error: if the data section cannot be parsed, or its epochs are
            not in chronological order
    """

    def __init__(self, satellite, sp3: Sp3Reader, max_lookaround=None, min_points_per_side: int = None):
        settings = get_interpolation_settings()
        if max_lookaround is None:
            max_lookaround = settings.max_lookaround_seconds
        if min_points_per_side is None:
            min_points_per_side = settings.min_points_per_side

        if not sp3.has_satellite(satellite):
            raise SatelliteNotFoundError(f"satellite '{satellite}' is not declared in {sp3.filename}")

        self._svid = SatelliteId(satellite)
        self._sp3 = sp3
        self._max_lookaround = GNSSTime.to_timedelta(max_lookaround)
        self._min_points = int(min_points_per_side)
        self._t0 = sp3.start_epoch

        self._blocks: List[Sp3DataBlock] = []
        self._last_index = 0
        self._feed_from_sp3()

        self._epochs = np.array([b.t for b in self._blocks], dtype="datetime64[ns]")
        self._states = (np.array([b.state for b in self._blocks])
                        if self._blocks else np.zeros((0, 8)))
        # seconds since the start epoch of the file
        self._seconds = (self._epochs - self._t0).astype(np.int64) / GNSSTime.NS_PER_SECOND

        self._allocate_workspace(self.compute_workspace_size())

    def _feed_from_sp3(self) -> None:
        num_read = 0
        previous = None
        for block in self._sp3.data_blocks(self._svid):
            num_read += 1
            if previous is not None and block.t < previous:
                raise Sp3RecordError(
                    f"epoch {GNSSTime.format(block.t)} precedes the previous epoch {GNSSTime.format(previous)}")
            previous = block.t
            # position and clock both missing, nothing to interpolate
            if block.flag.is_set(Sp3Event.ABSENT_POSITION) and block.flag.is_set(Sp3Event.ABSENT_CLOCK):
                continue
            self._blocks.append(block)

        if num_read > self._sp3.num_epochs:
            logger.warning(f"Read {num_read} epochs, header declares {self._sp3.num_epochs}")
        logger.info(f"Fed interpolator with {len(self._blocks)} data points for {self._svid}")

    def compute_workspace_size(self) -> int:
        """Records in a full window: one-sided look-around doubled, plus the center."""
        interval = self._sp3.interval.astype(np.int64)
        if interval <= 0:
            return max(self._sp3.num_epochs, 1)
        one_side = math.ceil(int(self._max_lookaround.astype(np.int64)) / int(interval))
        return one_side * 2 + 1

    def _allocate_workspace(self, size: int) -> None:
        self._workspace_size = size
        self._txyz = np.zeros((4, size))
        self._td, self._xd, self._yd, self._zd = self._txyz
        self._workspace = np.zeros(6 * size)

    def _index_hunt(self, t: np.datetime64) -> int:
        """
        Index of the last record at or before t, clamped to the series. The
        index found last and its neighbours are tried before a binary search.
        """
        epochs = self._epochs
        n = epochs.shape[0]
        last = self._last_index
        for i in (last, last + 1, last - 1):
            if 0 <= i < n and epochs[i] <= t and (i == n - 1 or t < epochs[i + 1]):
                return i
        i = int(np.searchsorted(epochs, t, side="right")) - 1
        return min(max(i, 0), n - 1)

    def interpolate_at(self, t, velocity: bool = False) -> InterpolationResult:
        """
        Interpolate the satellite position at t, and its velocity if asked.

        Returns:
            InterpolationResult; position in km, velocity in dm/s

        Raises:
            TooFewPointsLeftError / TooFewPointsRightError: if the window
                around t holds less than min_points_per_side records on a side
            CoincidentAbscissaeError: if two records share the same epoch
        """
        t = GNSSTime.as_epoch(t)
        n = self.num_data_points
        if n == 0:
            raise InterpolationWindowError(f"no data points for {self._svid}")

        index = self._index_hunt(t)
        self._last_index = index

        epochs = self._epochs
        max_t = self._max_lookaround

        start = index
        while start > 0 and t - epochs[start] < max_t:
            start -= 1
        if index - start < self._min_points:
            raise TooFewPointsLeftError(
                f"too few data points on the left of {GNSSTime.format(t)} "
                f"({index - start} < {self._min_points})")

        stop = index
        while stop < n - 1 and epochs[stop] - t < max_t:
            stop += 1
        if stop - index < self._min_points:
            raise TooFewPointsRightError(
                f"too few data points on the right of {GNSSTime.format(t)} "
                f"({stop - index} < {self._min_points})")

        size = stop - start + 1
        if size > self._workspace_size:
            logger.debug(f"Growing workspace from {self._workspace_size} to {size} data points")
            self._allocate_workspace(size)

        tx = GNSSTime.seconds_between(t, self._t0)
        self._td[:size] = self._seconds[start:stop + 1]
        self._xd[:size] = self._states[start:stop + 1, 0]
        self._yd[:size] = self._states[start:stop + 1, 1]
        self._zd[:size] = self._states[start:stop + 1, 2]
        pos, pos_err = neville_interpolation3(tx, self._td, self._xd, self._yd, self._zd,
                                              size, 0, self._workspace)
        result = InterpolationResult(epoch=t, position=pos, position_error=pos_err, num_points=size)

        if velocity:
            # same window and time buffer
            self._xd[:size] = self._states[start:stop + 1, 4]
            self._yd[:size] = self._states[start:stop + 1, 5]
            self._zd[:size] = self._states[start:stop + 1, 6]
            result.velocity, result.velocity_error = neville_interpolation3(
                tx, self._td, self._xd, self._yd, self._zd, size, 0, self._workspace)

        return result

    @property
    def svid(self) -> SatelliteId:
        return self._svid

    @property
    def num_data_points(self) -> int:
        return len(self._blocks)

    @property
    def data_blocks(self) -> List[Sp3DataBlock]:
        return self._blocks

    @property
    def first_block_date(self) -> Optional[np.datetime64]:
        return self._blocks[0].t if self._blocks else None

    @property
    def last_block_date(self) -> Optional[np.datetime64]:
        return self._blocks[-1].t if self._blocks else None

    @property
    def has_velocity(self) -> bool:
        """True if any retained record carries a velocity."""
        return any(b.has_velocity() for b in self._blocks)

    @property
    def workspace_size(self) -> int:
        return self._workspace_size

    @property
    def last_index(self) -> int:
        return self._last_index

    @property
    def max_lookaround(self) -> np.timedelta64:
        return self._max_lookaround


__all__ = ["SvInterpolator"]
