"""
Forward cursor over the data blocks of one satellite.
"""
from typing import Iterator, Optional

import numpy as np

from sp3kit.data_models import Sp3DataBlock
from sp3kit.errors import Sp3RecordError, Sp3SeekError
from sp3kit.gnss_time import GNSSTime
from sp3kit.sp3 import Sp3Reader


class Sp3Iterator:
    """
    Walks an Sp3Reader block by block, keeping the last block read.

    The satellite filter is fixed at construction. A satellite the file does
    not declare is accepted; every block then has all its values marked
    absent.
    """

    def __init__(self, sp3: Sp3Reader, satellite):
        self._sp3 = sp3
        self._satellite = satellite
        self._block: Optional[Sp3DataBlock] = None
        self.begin()

    @property
    def satellite(self):
        return self._satellite

    @property
    def data_block(self) -> Sp3DataBlock:
        return self._block

    def current_time(self) -> np.datetime64:
        return self._block.t

    def begin(self) -> Sp3DataBlock:
        """
        Rewind the reader and load the first data block.

        Raises:
            Sp3RecordError: if the file holds no data blocks
        """
        self._sp3.rewind()
        block = self._sp3.get_next_data_block(self._satellite)
        if block is None:
            raise Sp3RecordError("SP3 file holds no data blocks")
        self._block = block
        return block

    def advance(self) -> Optional[Sp3DataBlock]:
        """
        Load the next data block.

        Returns:
            The new block, or None at end of stream (the current block is
            left unchanged)
        """
        block = self._sp3.get_next_data_block(self._satellite)
        if block is not None:
            self._block = block
        return block

    def peek_next_epoch(self) -> Optional[np.datetime64]:
        return self._sp3.peek_next_epoch()

    def goto_time(self, t) -> Optional[Sp3DataBlock]:
        """
        Position the cursor on the last block at or before t, so that
        current_time() <= t and the next epoch (if any) is >= t.

        When t is exactly an epoch the cursor stops on that block rather than
        on the one before it, so current_time() == t and the next epoch is
        strictly later.

        Skipped blocks are never resolved, only their epoch lines are peeked.

        Returns:
            The current block, or None if the stream ends before an epoch
            >= t is seen

        Raises:
            Sp3SeekError: if t precedes the first data block
        """
        t = GNSSTime.as_epoch(t)
        if t < self._block.t:
            self.begin()
            if t < self._block.t:
                raise Sp3SeekError(
                    f"requested epoch {GNSSTime.format(t)} precedes the first data block "
                    f"({GNSSTime.format(self._block.t)})")

        while True:
            next_epoch = self.peek_next_epoch()
            if next_epoch is None:
                return self._block if self._block.t == t else None
            if next_epoch > t:
                return self._block
            self.advance()

    def __iter__(self) -> Iterator[Sp3DataBlock]:
        block = self.advance()
        while block is not None:
            yield block
            block = self.advance()


__all__ = ["Sp3Iterator"]
