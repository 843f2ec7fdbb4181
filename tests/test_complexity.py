import numpy as np
import pytest

from product_space.complexity import diversification_ubiquity, eci_pci, normalize

NESTED = np.array([[1.0, 1.0, 1.0],
                   [1.0, 1.0, 0.0],
                   [1.0, 0.0, 0.0]])


class TestNormalize:

    def test_methods(self):
        v = np.array([1.0, 2.0, 3.0])
        np.testing.assert_allclose(normalize(v, 'sum'), v / 6)
        np.testing.assert_allclose(normalize(v, 'max'), v / 3)
        np.testing.assert_allclose(normalize(v, 'mean'), v / 2)
        z = normalize(v, 'zscore')
        assert z.mean() == pytest.approx(0.0)
        assert z.std() == pytest.approx(1.0)

    def test_unknown(self):
        with pytest.raises(ValueError):
            normalize(np.ones(3), 'median')


class TestEciPci:

    def test_diversification_ubiquity(self):
        div, ubi = diversification_ubiquity(NESTED)
        np.testing.assert_array_equal(div, [3, 2, 1])
        np.testing.assert_array_equal(ubi, [3, 2, 1])

    @pytest.mark.parametrize("method", ["reflections", "spectral"])
    def test_nested_ordering(self, method):
        eci, pci = eci_pci(NESTED, method=method)
        # least diversified country and most ubiquitous product rank last
        assert np.argmin(eci) == 2
        assert np.argmin(pci) == 0
        assert np.corrcoef(eci, [3, 2, 1])[0, 1] > 0
        assert eci.mean() == pytest.approx(0.0, abs=1e-9)

    def test_methods_agree(self):
        eci_r, pci_r = eci_pci(NESTED, method='reflections')
        eci_e, pci_e = eci_pci(NESTED, method='spectral')
        np.testing.assert_allclose(eci_r, eci_e, atol=1e-2)
        np.testing.assert_allclose(pci_r, pci_e, atol=1e-2)

    def test_empty_rows_and_columns_are_nan(self):
        M = np.zeros((4, 4))
        M[:3, :3] = NESTED
        eci, pci = eci_pci(M, method='spectral')
        assert np.isnan(eci[3]) and np.isnan(pci[3])
        assert np.isfinite(eci[:3]).all() and np.isfinite(pci[:3]).all()

    def test_degenerate_matrix(self):
        eci, pci = eci_pci(np.array([[1.0, 1.0]]))
        assert np.isnan(eci).all() and np.isnan(pci).all()

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            eci_pci(NESTED, method='fitness')

    def test_eigenvalue_is_spectral(self):
        eci_s, pci_s = eci_pci(NESTED, method='spectral')
        eci_e, pci_e = eci_pci(NESTED, method='eigenvalue')
        np.testing.assert_array_equal(eci_s, eci_e)
        np.testing.assert_array_equal(pci_s, pci_e)

    @pytest.mark.filterwarnings("error")
    def test_uniform_matrix_is_nan(self):
        eci, pci = eci_pci(np.ones((3, 3)))
        assert np.isnan(eci).all() and np.isnan(pci).all()

    @pytest.mark.filterwarnings("error")
    def test_constant_vector_zscore(self):
        assert np.isnan(normalize(np.full(3, 2.0), 'zscore')).all()
