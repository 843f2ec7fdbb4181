from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union


class Index:
    """
    Bidirectional mapping between the labels of one matrix axis
    (e.g. country codes or product codes) and their row/column positions.

    An Index is built once and never modified afterwards: every matrix
    and result view computed from the same ProductSpace shares the same
    Index object for each axis.

    Parameters
    ----------
      - labels : iterable of str
          Labels in position order. Duplicates raise ValueError.
    """
    def __init__(self, labels: Iterable[str]) -> None:
        self._labels: Tuple[str, ...] = tuple(labels)
        positions = {label: i for i, label in enumerate(self._labels)}
        if len(positions) != len(self._labels):
            raise ValueError("Index labels must be unique.")
        self._positions = MappingProxyType(positions)

    @classmethod
    def build(cls, names: Iterable[str]) -> "Index":
        """
        Build an index from any collection of names, dropping duplicates.
        Positions follow the sorted order of the names, so the same set
        always yields the same index.
        """
        return cls(sorted(set(names)))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> "Index":
        """
        Build an index from an existing {name: position} mapping.
        Positions must cover 0..n-1 exactly once.
        """
        labels = [None] * len(mapping)
        for name, pos in mapping.items():
            if not 0 <= pos < len(mapping) or labels[pos] is not None:
                raise ValueError(f"Invalid position {pos} for label {name!r}.")
            labels[pos] = name
        return cls(labels)

    @classmethod
    def coerce(cls, index: Union["Index", Mapping[str, int], Iterable[str]]) -> "Index":
        if isinstance(index, Index):
            return index
        if isinstance(index, Mapping):
            return cls.from_mapping(index)
        return cls(index)

    def position(self, name: str) -> Optional[int]:
        return self._positions.get(name)

    def name_of(self, position: int) -> Optional[str]:
        if 0 <= position < len(self._labels):
            return self._labels[position]
        return None

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._labels

    @property
    def positions(self) -> Mapping[str, int]:
        # read-only view, callers cannot mutate the index through it
        return self._positions

    def to_dict(self) -> Dict[str, int]:
        return dict(self._positions)

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, name) -> bool:
        return name in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Index):
            return NotImplemented
        return self._labels == other._labels

    def __hash__(self) -> int:
        return hash(self._labels)

    def __repr__(self) -> str:
        return f"Index(n={len(self)})"
