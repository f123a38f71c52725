"""
Polynomial interpolation with Neville's algorithm.

Given mm samples (t[i], y[i]), the unique polynomial of degree mm-1 through
them is evaluated at x by building the tableau of differences c and d column
by column. The value is accumulated from the sample nearest to x; the last
correction added serves as the error estimate.

neville_interpolation3 walks the tableau once for three ordinate series that
share the same abscissae (e.g. X, Y, Z of a satellite), each with its own
independent c/d columns.
"""
import numpy as np

from sp3kit.errors import CoincidentAbscissaeError, NotEnoughSamplesError


def _check_range(n: int, mm, from_index: int) -> int:
    if mm is None:
        mm = n - from_index
    if from_index < 0 or mm < 1 or from_index + mm > n:
        raise NotEnoughSamplesError(
            f"cannot take {mm} samples starting at index {from_index} out of {n}")
    return mm


def _neville_walk(x: float, t: np.ndarray, c: np.ndarray, d: np.ndarray):
    """
    Run the tableau over k series at once.

    Args:
        x: interpolation point
        t: abscissae, shape (mm,)
        c, d: seeded with the ordinates, shape (k, mm); overwritten

    Returns:
        (y, dy) arrays of shape (k,)
    """
    mm = t.shape[0]

    ns = 0
    dif = abs(x - t[0])
    for i in range(1, mm):
        dift = abs(x - t[i])
        if dift < dif:
            ns = i
            dif = dift

    y = c[:, ns].copy()
    dy = np.zeros(c.shape[0])
    ns -= 1
    for m in range(1, mm):
        for i in range(mm - m):
            ho = t[i] - x
            hp = t[i + m] - x
            den = ho - hp
            if den == 0e0:
                raise CoincidentAbscissaeError(
                    f"abscissae #{i} and #{i + m} are identical ({t[i]})")
            w = (c[:, i + 1] - d[:, i]) / den
            d[:, i] = hp * w
            c[:, i] = ho * w
        if 2 * (ns + 1) < mm - m:
            dy = c[:, ns + 1].copy()
        else:
            dy = d[:, ns].copy()
            ns -= 1
        y += dy
    return y, dy


def neville_interpolation(x: float, xx, yy, mm: int = None, from_index: int = 0,
                          c: np.ndarray = None, d: np.ndarray = None):
    """
    Interpolate the samples (xx[i], yy[i]), i in [from_index, from_index+mm),
    at x.

    Args:
        x: interpolation point
        xx: abscissae
        yy: ordinates
        mm: number of samples to use; all from from_index on if not given
        from_index: first sample to use
        c, d: optional work arrays of size >= mm

    Returns:
        (y, dy): interpolated value and error estimate

    Raises:
        NotEnoughSamplesError: if the requested range exceeds the samples
        CoincidentAbscissaeError: if two abscissae are identical
    """
    mm = _check_range(min(len(xx), len(yy)), mm, from_index)
    t = np.asarray(xx, dtype=float)[from_index:from_index + mm]
    if c is None:
        c = np.empty(mm)
    if d is None:
        d = np.empty(mm)
    cv = c[:mm].reshape(1, mm)
    dv = d[:mm].reshape(1, mm)
    cv[0, :] = yy[from_index:from_index + mm]
    dv[0, :] = cv[0, :]
    y, dy = _neville_walk(x, t, cv, dv)
    return float(y[0]), float(dy[0])


def neville_interpolation3(x: float, tt, xx, yy, zz, mm: int = None, from_index: int = 0,
                           workspace: np.ndarray = None):
    """
    Interpolate three series sharing the abscissae tt at x.

    Args:
        x: interpolation point
        tt: abscissae
        xx, yy, zz: ordinates of the three series
        mm: number of samples to use; all from from_index on if not given
        from_index: first sample to use
        workspace: optional work array of size >= 6*mm

    Returns:
        (estimates, errors): two arrays of shape (3,)

    Raises:
        NotEnoughSamplesError: if the requested range exceeds the samples
        CoincidentAbscissaeError: if two abscissae are identical
    """
    n = min(len(tt), len(xx), len(yy), len(zz))
    mm = _check_range(n, mm, from_index)
    if workspace is None:
        workspace = np.empty(6 * mm)
    elif workspace.shape[0] < 6 * mm:
        raise ValueError(f"workspace holds {workspace.shape[0]} values, {6 * mm} needed")

    t = np.asarray(tt, dtype=float)[from_index:from_index + mm]
    c = workspace[:3 * mm].reshape(3, mm)
    d = workspace[3 * mm:6 * mm].reshape(3, mm)
    for k, series in enumerate((xx, yy, zz)):
        c[k, :] = series[from_index:from_index + mm]
    d[:, :] = c
    return _neville_walk(x, t, c, d)


__all__ = ["neville_interpolation", "neville_interpolation3"]
