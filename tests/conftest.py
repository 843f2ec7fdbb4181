import logging

import numpy as np
import pytest

from product_space import Index, ProductSpace


def pytest_configure(config):
    # Set up logging configuration for stdout only
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


@pytest.fixture
def exports():
    """Two countries (rows) by three products (columns)."""
    return np.array([[1.0, 3.0, 5.0],
                     [2.0, 4.0, 6.0]])


@pytest.fixture
def expected_rca():
    return np.array([[7 / 9, 1.0, 35 / 33],
                     [7 / 6, 1.0, 21 / 22]])


@pytest.fixture
def country_index():
    return Index(["a", "b"])


@pytest.fixture
def product_index():
    return Index(["01", "02", "03"])


@pytest.fixture
def space(country_index, product_index, exports):
    later = np.array([[2.0, 1.0, 5.0],
                      [1.0, 4.0, 0.0]])
    return ProductSpace(country_index, product_index, {2016: later, 2017: exports}, cutoff=1.0)
