"""
Named lookups over computed matrices.

Every view keeps a reference to the Index objects of the ProductSpace it
came from; indices are shared, never copied.
"""
from typing import List

import networkx as nx
import numpy as np
import pandas as pd

from product_space.complexity import as_series
from product_space.errors import UnknownNameError
from product_space.index import Index
from product_space.relatedness import proximity_network


def _position(index: Index, name: str, axis: str) -> int:
    pos = index.position(name)
    if pos is None:
        raise UnknownNameError(name, axis)
    return pos


class _CountryProductView:
    """Country x product matrix with lookups by country and product name."""

    def __init__(self, country_index: Index, product_index: Index, m: np.ndarray) -> None:
        if m.shape != (len(country_index), len(product_index)):
            raise ValueError(f"Matrix shape {m.shape} does not match the indices.")
        self.country_index = country_index
        self.product_index = product_index
        # read-only view; the caller's array keeps its flags
        self._m = m.view()
        self._m.flags.writeable = False

    @property
    def matrix(self) -> np.ndarray:
        return self._m

    def get(self, country: str, product: str) -> float:
        i = _position(self.country_index, country, "country")
        j = _position(self.product_index, product, "product")
        return float(self._m[i, j])

    def get_row(self, country: str) -> List[float]:
        """
        All product values for a country, in product index order.
        """
        i = _position(self.country_index, country, "country")
        return self._m[i].tolist()

    get_country = get_row

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self._m,
            index=list(self.country_index.labels),
            columns=list(self.product_index.labels),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(countries={len(self.country_index)}, products={len(self.product_index)})"


class Rca(_CountryProductView):
    """Revealed comparative advantage, raw, averaged or binarized."""


class Density(_CountryProductView):
    """Proximity-weighted share of related products already exported."""


class Distance(_CountryProductView):
    """One minus the density."""


class Proximity:
    """Product x product proximity."""

    def __init__(self, product_index: Index, m: np.ndarray) -> None:
        if m.shape != (len(product_index), len(product_index)):
            raise ValueError(f"Matrix shape {m.shape} does not match the product index.")
        self.product_index = product_index
        self._m = m.view()
        self._m.flags.writeable = False

    @property
    def matrix(self) -> np.ndarray:
        return self._m

    def get(self, product: str, other: str) -> float:
        i = _position(self.product_index, product, "product")
        j = _position(self.product_index, other, "product")
        return float(self._m[i, j])

    def get_row(self, product: str) -> List[float]:
        i = _position(self.product_index, product, "product")
        return self._m[i].tolist()

    get_product = get_row

    def to_frame(self) -> pd.DataFrame:
        labels = list(self.product_index.labels)
        return pd.DataFrame(self._m, index=labels, columns=labels)

    def to_network(self, threshold: float = 0.0, backbone: bool = False) -> nx.Graph:
        return proximity_network(self._m, self.product_index.labels, threshold=threshold, backbone=backbone)

    def __repr__(self) -> str:
        return f"Proximity(products={len(self.product_index)})"


class Complexity:
    """ECI per country and PCI per product."""

    def __init__(self, country_index: Index, product_index: Index, eci: np.ndarray, pci: np.ndarray) -> None:
        self.country_index = country_index
        self.product_index = product_index
        self._eci = eci
        self._pci = pci

    def eci(self, country: str) -> float:
        return float(self._eci[_position(self.country_index, country, "country")])

    def pci(self, product: str) -> float:
        return float(self._pci[_position(self.product_index, product, "product")])

    def eci_series(self) -> pd.Series:
        return as_series(self._eci, self.country_index, "ECI")

    def pci_series(self) -> pd.Series:
        return as_series(self._pci, self.product_index, "PCI")
