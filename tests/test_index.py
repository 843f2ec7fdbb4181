import pytest

from product_space import Index


class TestIndex:

    def test_build_is_sorted_and_unique(self):
        idx = Index.build({"usa", "nzl", "arg", "usa"} | {"nzl"})
        assert idx.labels == ("arg", "nzl", "usa")
        assert idx.position("nzl") == 1
        assert idx.name_of(2) == "usa"

    def test_round_trip(self):
        idx = Index(["b", "a", "c"])
        for name in idx:
            assert idx.name_of(idx.position(name)) == name

    def test_absent(self):
        idx = Index(["a"])
        assert idx.position("z") is None
        assert idx.name_of(1) is None
        assert idx.name_of(-1) is None
        assert "z" not in idx

    def test_duplicates_rejected(self):
        with pytest.raises(ValueError):
            Index(["a", "a"])

    def test_from_mapping(self):
        idx = Index.from_mapping({"x": 1, "y": 0})
        assert idx.labels == ("y", "x")

    def test_from_mapping_rejects_gaps(self):
        with pytest.raises(ValueError):
            Index.from_mapping({"x": 0, "y": 2})

    def test_read_only(self):
        idx = Index(["a", "b"])
        with pytest.raises(TypeError):
            idx.positions["c"] = 2
        assert len(idx) == 2

    def test_coerce_keeps_instance(self):
        idx = Index(["a"])
        assert Index.coerce(idx) is idx
        assert Index.coerce({"a": 0}) == idx
        assert Index.coerce(["a"]) == idx
