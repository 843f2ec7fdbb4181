import logging
import os
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd
import scipy.sparse as sp

from product_space import config
from product_space.errors import IngestionError
from product_space.index import Index
from product_space.space import ProductSpace

logger = logging.getLogger(__name__)

COLUMNS = ["country", "product", "year", "value"]


def read_observations(
        filepath: Union[str, Path],
        country_col: str = config.COUNTRY_COLUMN,
        product_col: str = config.PRODUCT_COLUMN,
        year_col: str = config.YEAR_COLUMN,
        value_col: str = config.VALUE_COLUMN,
        sep: Optional[str] = None,
        null: str = config.NULL_SENTINEL
        ) -> pd.DataFrame:
    """
    Read country, product, year, value observations from a delimited file.

    Values equal to the null sentinel are kept as NaN: they do not count as
    exports, but their country, product and year still enter the indices.
    Any other value that is not a number is an error.

    Parameters
    ----------
      - filepath : str or Path
          path to the input file
      - country_col, product_col, year_col, value_col : str
          column names in the file header
      - sep : str, optional
          field separator; tab for .tsv files and comma otherwise
      - null : str
          textual marker of a missing value

    Returns
    -------
      - pd.DataFrame
          columns 'country', 'product' (str), 'year' (int), 'value' (float)
    """
    filepath = Path(filepath)
    if sep is None:
        _, ext = os.path.splitext(str(filepath).lower())
        sep = '\t' if ext in ['.tsv'] else ','  # Use tab for .tsv, comma for others

    wanted = [country_col, product_col, year_col, value_col]
    try:
        raw = pd.read_csv(filepath, sep=sep, dtype=str, keep_default_na=False)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise IngestionError(f"Failed to read file {filepath}: {e}") from e

    missing = [c for c in wanted if c not in raw.columns]
    if missing:
        raise IngestionError(f"Columns {missing} not found in {filepath}")

    df = raw[wanted].copy()
    df.columns = COLUMNS

    # header is line 1
    years = pd.to_numeric(df["year"], errors="coerce")
    bad_years = years.isna() | (years != years.round())
    if bad_years.any():
        line = int(np.flatnonzero(bad_years.to_numpy())[0]) + 2
        raise IngestionError(f"Invalid year {df['year'].iloc[line - 2]!r} at line {line} of {filepath}")
    df["year"] = years.astype(int)

    is_null = df["value"] == null
    values = pd.to_numeric(df["value"].where(~is_null), errors="coerce")
    bad_values = values.isna() & ~is_null
    if bad_values.any():
        line = int(np.flatnonzero(bad_values.to_numpy())[0]) + 2
        raise IngestionError(f"Invalid value {df['value'].iloc[line - 2]!r} at line {line} of {filepath}")
    df["value"] = values.astype(float)

    logger.info("read %d observations (%d null) from %s", len(df), int(is_null.sum()), filepath)
    return df


def build_matrices(df: pd.DataFrame) -> Tuple[Index, Index, Dict[int, np.ndarray]]:
    """
    Turn observations into one dense country x product matrix per year.

    All years share the same indices, built from every country and product
    seen in any year (null observations included). Missing cells are 0 and
    repeated observations of the same cell are summed.

    Returns
    -------
      - tuple: (country_index, product_index, {year: np.ndarray})
    """
    country_index = Index.build(df["country"])
    product_index = Index.build(df["product"])
    shape = (len(country_index), len(product_index))

    rows = df["country"].map(country_index.to_dict()).to_numpy()
    cols = df["product"].map(product_index.to_dict()).to_numpy()
    values = df["value"].to_numpy()
    present = ~np.isnan(values)

    matrices = {}
    for year in sorted(df["year"].unique()):
        mask = present & (df["year"].to_numpy() == year)
        coo = sp.coo_matrix((values[mask], (rows[mask], cols[mask])), shape=shape)
        matrices[int(year)] = coo.toarray()

    return country_index, product_index, matrices


def product_space_from_file(
        filepath: Union[str, Path],
        cutoff: Optional[float] = None,
        **kwargs
        ) -> ProductSpace:
    """
    Read an observations file and build a ProductSpace from it.

    Keyword arguments are passed to read_observations(), except the
    ProductSpace options 'skip_missing_years', 'average_divisor' and
    'exclude_self'.
    """
    space_kwargs = {k: kwargs.pop(k) for k in ('skip_missing_years', 'average_divisor', 'exclude_self') if k in kwargs}
    df = read_observations(filepath, **kwargs)
    country_index, product_index, matrices = build_matrices(df)
    return ProductSpace(country_index, product_index, matrices, cutoff=cutoff, **space_kwargs)
