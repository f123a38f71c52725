"""
Satellite identifier as recorded in SP3 files (e.g. 'G01', 'R27', 'L51').
"""

# Number of characters used to describe a satellite vehicle
SAT_ID_CHARS = 3


class SatelliteId:
    """
    Immutable 3-character satellite id.

    Only the first SAT_ID_CHARS characters of the input are kept; longer input
    is silently truncated and shorter input is padded with blanks, matching the
    fixed width of the id columns in the file. No case normalization.
    """

    __slots__ = ("_id",)

    def __init__(self, sid: str = ""):
        if isinstance(sid, SatelliteId):
            sid = sid.id
        object.__setattr__(self, "_id", str(sid)[:SAT_ID_CHARS].ljust(SAT_ID_CHARS))

    @property
    def id(self) -> str:
        return self._id

    def __setattr__(self, name, value):
        raise AttributeError("SatelliteId is immutable")

    def __eq__(self, other):
        if isinstance(other, SatelliteId):
            return self._id == other._id
        if isinstance(other, str):
            # raw strings must match the 3-char id exactly
            return self._id == other
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._id)

    def __str__(self):
        return self._id

    def __repr__(self):
        return f"SatelliteId('{self._id}')"

    @property
    def system(self) -> str:
        """Satellite system character ('G', 'R', 'E', 'C', 'L', ...)."""
        return self._id[0]


__all__ = ["SatelliteId", "SAT_ID_CHARS"]
