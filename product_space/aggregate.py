"""
Combination of per-year matrices into a single multi-year matrix.

Two semantics are supported:

  - AVERAGE: arithmetic mean of the yearly matrices.
  - CUTOFF_CHAIN: a cell is 1.0 only if the yearly value passes the cutoff
    in every year (logical AND expressed with 0/1 values).

Years that are not available are skipped by default. For the average the
sum is divided by the number of requested years unless the caller asks to
divide by the number of years actually found.
"""
import logging
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple

import numpy as np

from product_space.comparative_advantage import apply_fair_share, apply_fair_share_into

logger = logging.getLogger(__name__)


class Aggregation(str, Enum):
    AVERAGE = "average"
    CUTOFF_CHAIN = "cutoff_chain"


class AverageDivisor(str, Enum):
    REQUESTED = "requested"
    FOUND = "found"


def _select(
        by_year: Mapping[int, np.ndarray],
        years: Sequence[int],
        skip_missing: bool
        ) -> Optional[list]:
    found = [by_year[y] for y in years if y in by_year]
    if len(found) < len(years):
        missing = [y for y in years if y not in by_year]
        if not skip_missing:
            logger.debug("years %s unavailable, no result", missing)
            return None
        logger.debug("skipping unavailable years %s", missing)
    return found


def aggregate(
        by_year: Mapping[int, np.ndarray],
        years: Sequence[int],
        shape: Tuple[int, int],
        mode: Aggregation = Aggregation.AVERAGE,
        cutoff: Optional[float] = None,
        divisor: AverageDivisor = AverageDivisor.REQUESTED,
        skip_missing: bool = True
        ) -> Optional[np.ndarray]:
    """
    Combine the matrices of the requested years.

    Parameters
    ----------
      - by_year : mapping int -> np.ndarray
          Precomputed yearly matrices, all of shape `shape`.
      - years : sequence of int
          Requested years, in order.
      - shape : tuple
          Shape of the accumulator.
      - mode : Aggregation
          AVERAGE or CUTOFF_CHAIN.
      - cutoff : float, optional
          Threshold for CUTOFF_CHAIN (default 1.0).
      - divisor : AverageDivisor
          REQUESTED divides the sum by len(years), FOUND by the number of
          years present in `by_year`.
      - skip_missing : bool
          If False, a multi-year request with any missing year gives None.

    Returns
    -------
      - np.ndarray or None
          None when no years are requested or a single requested year is
          missing. A fresh array otherwise, never a reference to `by_year`.
    """
    mode = Aggregation(mode)
    divisor = AverageDivisor(divisor)

    if len(years) == 0:
        return None

    if len(years) == 1:
        matrix = by_year.get(years[0])
        if matrix is None:
            return None
        out = matrix.copy()
        if mode is Aggregation.CUTOFF_CHAIN:
            apply_fair_share(out, cutoff)
        return out

    found = _select(by_year, years, skip_missing)
    if found is None:
        return None

    if mode is Aggregation.CUTOFF_CHAIN:
        out = np.ones(shape)
        for matrix in found:
            apply_fair_share_into(matrix.copy(), out, cutoff)
        return out

    out = np.zeros(shape)
    for matrix in found:
        out += matrix

    if divisor is AverageDivisor.REQUESTED:
        out /= len(years)
    elif found:
        out /= len(found)
    return out


def logical_and(
        by_year: Mapping[int, np.ndarray],
        years: Sequence[int],
        shape: Tuple[int, int],
        skip_missing: bool = True
        ) -> Optional[np.ndarray]:
    """
    Element-wise product of already binarized yearly matrices.
    Same availability rules as aggregate().
    """
    if len(years) == 0:
        return None

    if len(years) == 1:
        matrix = by_year.get(years[0])
        return None if matrix is None else matrix.copy()

    found = _select(by_year, years, skip_missing)
    if found is None:
        return None

    out = np.ones(shape)
    for matrix in found:
        out *= matrix
    return out
