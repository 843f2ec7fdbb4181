import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.sparse as sp

from product_space.aggregate import Aggregation, AverageDivisor, aggregate, logical_and
from product_space.comparative_advantage import apply_fair_share, rca
from product_space.complexity import eci_pci
from product_space import relatedness
from product_space.config import DEFAULT_CUTOFF, REFLECTION_ITERATIONS
from product_space.index import Index
from product_space.views import Complexity, Density, Distance, Proximity, Rca

logger = logging.getLogger(__name__)

Years = Union[int, Sequence[int]]


class ProductSpace:
    """
    Country-product space built from yearly export matrices.

    On construction, for every year in the input it computes and keeps:
      - the RCA matrix
      - the RCA matrix binarized at the construction cutoff
      - the product proximity matrix from the binarized RCA, with NaN
        (products exported by nobody) replaced by 0.0

    Afterwards the object is never modified: all query methods are pure
    reads returning new result views, or None when the requested years are
    not available.

    Parameters
    ----------
      - country_index : Index or dict {name: position}
          Row axis.
      - product_index : Index or dict {name: position}
          Column axis.
      - matrices : mapping year -> matrix
          Export values (countries x products). numpy arrays, nested lists
          or scipy sparse matrices are accepted.
      - cutoff : float, optional
          RCA threshold for the precomputed binarized RCA and proximity
          matrices. Defaults to 1.0.
      - skip_missing_years : bool
          If True (default) multi-year queries skip unavailable years.
          If False they return None as soon as one year is missing.
      - average_divisor : 'requested' or 'found'
          Whether multi-year averages divide by the number of requested
          years (default) or by the number of years actually available.
      - exclude_self : bool
          Leave a product's proximity to itself out of densities (default).
    """

    def __init__(
            self,
            country_index: Union[Index, Mapping[str, int]],
            product_index: Union[Index, Mapping[str, int]],
            matrices: Mapping[int, object],
            cutoff: Optional[float] = None,
            skip_missing_years: bool = True,
            average_divisor: Union[str, AverageDivisor] = AverageDivisor.REQUESTED,
            exclude_self: bool = True
    ) -> None:
        self._country_index = Index.coerce(country_index)
        self._product_index = Index.coerce(product_index)
        self._cutoff = DEFAULT_CUTOFF if cutoff is None else float(cutoff)
        self._skip_missing = skip_missing_years
        self._divisor = AverageDivisor(average_divisor)
        self._exclude_self = exclude_self

        shape = self.shape
        self._mcps: Dict[int, np.ndarray] = {}
        for year, matrix in matrices.items():
            m = self._to_dense(matrix)
            if m.shape != shape:
                raise ValueError(f"Matrix for year {year} has shape {m.shape}, expected {shape}.")
            if int(year) in self._mcps:
                raise ValueError(f"Year {year!r} given more than once.")
            self._mcps[int(year)] = m

        logger.info(
            "building product space: %d years, %d countries, %d products, cutoff %s",
            len(self._mcps), shape[0], shape[1], self._cutoff
        )

        self._rcas_by_year: Dict[int, np.ndarray] = {}
        self._rcas_cutoff_by_year: Dict[int, np.ndarray] = {}
        self._proximities_by_year: Dict[int, np.ndarray] = {}

        for year, mcp in self._mcps.items():
            logger.debug("computing rca and proximity for %d", year)
            rca_matrix = rca(mcp)
            self._rcas_by_year[year] = rca_matrix

            binary = rca_matrix.copy()
            apply_fair_share(binary, self._cutoff)
            self._rcas_cutoff_by_year[year] = binary

            prox = relatedness.proximity(binary)
            # products exported by nobody: undefined proximity becomes 0
            prox[np.isnan(prox)] = 0.0
            self._proximities_by_year[year] = prox

        for m in (*self._rcas_by_year.values(), *self._rcas_cutoff_by_year.values(),
                  *self._proximities_by_year.values()):
            m.flags.writeable = False

    @staticmethod
    def _to_dense(matrix) -> np.ndarray:
        if sp.issparse(matrix):
            return matrix.toarray().astype(float)
        return np.array(matrix, dtype=float)

    # -----------------------------
    # Accessors
    # -----------------------------
    @property
    def country_index(self) -> Index:
        return self._country_index

    @property
    def product_index(self) -> Index:
        return self._product_index

    @property
    def cutoff(self) -> float:
        return self._cutoff

    @property
    def years(self) -> Tuple[int, ...]:
        return tuple(sorted(self._mcps))

    @property
    def shape(self) -> Tuple[int, int]:
        return len(self._country_index), len(self._product_index)

    # -----------------------------
    # Matrix selection
    # -----------------------------
    @staticmethod
    def _years(years: Years) -> Tuple[int, ...]:
        if isinstance(years, (int, np.integer)):
            return (int(years),)
        return tuple(int(y) for y in years)

    def rca_matrix(self, years: Years, cutoff: Optional[float] = None) -> Optional[np.ndarray]:
        """
        RCA for the given years. Without cutoff, the average of the yearly
        RCA; with a cutoff, 1.0 where the RCA passes it in every year.
        """
        mode = Aggregation.AVERAGE if cutoff is None else Aggregation.CUTOFF_CHAIN
        return aggregate(
            self._rcas_by_year, self._years(years), self.shape,
            mode=mode, cutoff=cutoff, divisor=self._divisor, skip_missing=self._skip_missing
        )

    def rca_cutoff_matrix(self, years: Years) -> Optional[np.ndarray]:
        return logical_and(
            self._rcas_cutoff_by_year, self._years(years), self.shape,
            skip_missing=self._skip_missing
        )

    def proximity_matrix(self, years: Years) -> Optional[np.ndarray]:
        n = len(self._product_index)
        return aggregate(
            self._proximities_by_year, self._years(years), (n, n),
            mode=Aggregation.AVERAGE, divisor=self._divisor, skip_missing=self._skip_missing
        )

    def _presence_and_proximity(
            self,
            years: Years,
            cutoff: Optional[float]
    ) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        cutoff = self._cutoff if cutoff is None else cutoff
        presence = self.rca_matrix(years, cutoff)
        proximity = self.proximity_matrix(years)
        if presence is None or proximity is None:
            return None
        return presence, proximity

    def density_matrix(self, years: Years, cutoff: Optional[float] = None) -> Optional[np.ndarray]:
        selected = self._presence_and_proximity(years, cutoff)
        if selected is None:
            return None
        return relatedness.density(*selected, exclude_self=self._exclude_self)

    def distance_matrix(self, years: Years, cutoff: Optional[float] = None) -> Optional[np.ndarray]:
        selected = self._presence_and_proximity(years, cutoff)
        if selected is None:
            return None
        return relatedness.distance(*selected, exclude_self=self._exclude_self)

    # -----------------------------
    # Queries
    # -----------------------------
    def rca(self, years: Years, cutoff: Optional[float] = None) -> Optional[Rca]:
        """
        Parameters
        ----------
          - years : int or sequence of int
          - cutoff : float, optional
              If given, the result is binarized and combined across years
              by logical AND, otherwise the raw RCA is averaged.

        Returns
        -------
          - Rca or None
              None if no year was requested or a single requested year is
              not available.
        """
        m = self.rca_matrix(years, cutoff)
        if m is None:
            return None
        return Rca(self._country_index, self._product_index, m)

    def rca_cutoff(self, years: Years) -> Optional[Rca]:
        """
        Binarized RCA at the construction cutoff, combined across years by
        logical AND (never averaged).
        """
        m = self.rca_cutoff_matrix(years)
        if m is None:
            return None
        return Rca(self._country_index, self._product_index, m)

    def proximity(self, years: Years) -> Optional[Proximity]:
        """
        Proximity at the construction cutoff, averaged across years.
        """
        m = self.proximity_matrix(years)
        if m is None:
            return None
        return Proximity(self._product_index, m)

    def density(self, years: Years, cutoff: Optional[float] = None) -> Optional[Density]:
        """
        Density from the RCA presence (at `cutoff`, or the construction
        cutoff) and the proximity of the same years.
        """
        m = self.density_matrix(years, cutoff)
        if m is None:
            return None
        return Density(self._country_index, self._product_index, m)

    def distance(self, years: Years, cutoff: Optional[float] = None) -> Optional[Distance]:
        m = self.distance_matrix(years, cutoff)
        if m is None:
            return None
        return Distance(self._country_index, self._product_index, m)

    def complexity(
            self,
            years: Years,
            cutoff: Optional[float] = None,
            method: str = 'reflections',
            iterations: int = REFLECTION_ITERATIONS
    ) -> Optional[Complexity]:
        """
        ECI and PCI computed on the RCA presence matrix of the given years.
        """
        presence = self.rca_matrix(years, self._cutoff if cutoff is None else cutoff)
        if presence is None:
            return None
        eci, pci = eci_pci(presence, method=method, iterations=iterations)
        return Complexity(self._country_index, self._product_index, eci, pci)

    def __repr__(self) -> str:
        return (f"ProductSpace(years={list(self.years)}, countries={len(self._country_index)}, "
                f"products={len(self._product_index)}, cutoff={self._cutoff})")
