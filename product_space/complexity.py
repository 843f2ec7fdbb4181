import logging
from typing import Tuple

import numpy as np
import pandas as pd
from scipy import linalg

from product_space.config import REFLECTION_ITERATIONS

logger = logging.getLogger(__name__)


def normalize(vector: np.ndarray, normalization: str = 'zscore') -> np.ndarray:
    """
    Normalize a numeric vector using a specified method. NaN entries are
    ignored by the statistics and kept as NaN.

    Parameters
    ----------
      - vector : np.ndarray
          The input array to normalize
      - normalization : str
          One of 'sum' (divide by sum), 'max' (divide by max),
                 'mean' (divide by mean), or 'zscore' (standard score).

    Returns
    -------
      - np.ndarray
          The normalized array.
    """
    if normalization == 'sum':
        return vector / np.nansum(vector)
    elif normalization == 'max':
        return vector / np.nanmax(vector)
    elif normalization == 'mean':
        return vector / np.nanmean(vector)
    elif normalization == 'zscore':
        std = np.nanstd(vector)
        if std == 0:
            # constant vector: no ranking
            return np.full(vector.shape, np.nan)
        vec = (vector - np.nanmean(vector)) / std
        eps = np.finfo(float).eps
        vec[np.abs(vec) < eps] = 0.0
        return vec
    else:
        raise ValueError(
            f"Unknown normalization '{normalization}'. "
            "Choose from 'sum', 'max', 'mean', or 'zscore'."
        )


def diversification_ubiquity(binary: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Diversification is the number of products per country (row sums),
    ubiquity the number of countries per product (column sums).
    """
    return binary.sum(axis=1), binary.sum(axis=0)


def eci_pci(
        binary: np.ndarray,
        method: str = 'reflections',
        iterations: int = REFLECTION_ITERATIONS,
        norm: str = 'zscore'
        ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the Economic Complexity Index (ECI) of countries and the
    Product Complexity Index (PCI) of products.

    Countries exporting nothing and products exported by nobody do not take
    part in the computation and get NaN.

    Parameters
    ----------
      - binary : np.ndarray
          0/1 matrix (countries x products).
      - method : str
          'reflections' (Hidalgo & Hausmann, 2009) or 'spectral'
          (second eigenvector of the country-country matrix). 'eigenvalue'
          is accepted as another name for 'spectral'.
      - iterations : int
          Number of reflections, only for 'reflections'. Should be even.
      - norm : str
          Normalization of the output vectors, see normalize().

    Returns
    -------
      - tuple
          (eci, pci) arrays of length n_countries and n_products.
    """
    if method not in ('reflections', 'spectral', 'eigenvalue'):
        raise ValueError(f"Unsupported method '{method}' choose 'reflections' or 'spectral'")

    diversification, ubiquity = diversification_ubiquity(binary)
    row_mask = diversification > 0
    col_mask = ubiquity > 0

    eci = np.full(binary.shape[0], np.nan)
    pci = np.full(binary.shape[1], np.nan)

    Mcp = np.asarray(binary[row_mask][:, col_mask], dtype=float)
    if Mcp.shape[0] < 2 or Mcp.shape[1] < 2:
        logger.warning("complexity undefined for a %dx%d matrix", *Mcp.shape)
        return eci, pci

    if method == 'reflections':
        kc, kp = _method_of_reflections(Mcp, iterations)
    else:
        kc, kp = _eci_pci_from_eig(Mcp)

    eci[row_mask] = normalize(kc, norm)
    pci[col_mask] = normalize(kp, norm)
    return eci, pci


def _method_of_reflections(Mcp: np.ndarray, iterations: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    kc_N = 1/kc_0 sum_p M_cp kp_(N-1)
    kp_N = 1/kp_0 sum_c M_cp kc_(N-1)

    Even orders of kc and odd orders of kp grow with complexity, so the
    product vector is taken one reflection after the country vector, and
    kc is signed to correlate positively with diversification.

    Reference
    ---------
      - Hidalgo C. and Hausmann R., *The building blocks of economic complexity*, PNAS 26 (2009)
    """
    kc0, kp0 = diversification_ubiquity(Mcp)
    kc, kp = kc0.astype(float), kp0.astype(float)

    for _ in range(iterations):
        kc, kp = (Mcp @ kp) / kc0, (Mcp.T @ kc) / kp0

    # odd iteration counts flip the ordering
    if _correlation(kc, kc0) < 0:
        kc = -kc

    return kc, (Mcp.T @ kc) / kp0


def _eci_pci_from_eig(Mcp: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    ECI is the eigenvector of the second largest eigenvalue of
    Mcc = D^-1 M U^-1 M^T, signed so that it correlates positively with
    diversification. PCI is the same for Mpp = U^-1 M^T D^-1 M, signed to
    agree with the average ECI of the exporters.
    """
    diversification, ubiquity = diversification_ubiquity(Mcp)
    D_inv = np.diag(1.0 / diversification)
    U_inv = np.diag(1.0 / ubiquity)

    Mcc = D_inv @ Mcp @ U_inv @ Mcp.T
    Mpp = U_inv @ Mcp.T @ D_inv @ Mcp

    kc = _second_eigenvector(Mcc)
    if _correlation(kc, diversification) < 0:
        kc = -kc

    kp = _second_eigenvector(Mpp)
    if _correlation(kp, (Mcp.T @ kc) / ubiquity) < 0:
        kp = -kp

    return kc, kp


def _correlation(x: np.ndarray, y: np.ndarray) -> float:
    # NaN when either vector is constant
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.corrcoef(x, y)[0, 1]


def _second_eigenvector(matrix: np.ndarray) -> np.ndarray:
    eigvals, eigvecs = linalg.eig(matrix)
    order = np.argsort(-eigvals.real)
    return eigvecs[:, order[1]].real


def as_series(values: np.ndarray, labels, name: str) -> pd.Series:
    return pd.Series(values, index=list(labels), name=name)
