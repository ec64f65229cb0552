"""
Search results and entity collections
"""
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

from app.dal.criteria import Criteria

T = TypeVar("T")


class EntityCollection(Generic[T]):
    """Ordered, immutable-by-convention sequence of entities."""

    def __init__(self, elements: Optional[Iterable[T]] = None):
        self._elements: List[T] = list(elements or [])

    def filter(self, predicate: Callable[[T], bool]) -> "EntityCollection[T]":
        """Return a new collection of the same type with matching elements."""
        return self.__class__(element for element in self._elements if predicate(element))

    def __iter__(self) -> Iterator[T]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, index: int) -> T:
        return self._elements[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityCollection):
            return NotImplemented
        return self._elements == other._elements

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._elements!r})"


class EntitySearchResult:
    """
    Result of a repository search.

    total and aggregations describe the search as executed; replacing the
    entities through assign() does not recompute them.
    """

    def __init__(
        self,
        entity: str,
        total: int,
        entities: EntityCollection,
        aggregations: Optional[Dict[str, Dict[str, Any]]] = None,
        criteria: Optional[Criteria] = None,
        context: Any = None,
    ):
        self.entity = entity
        self.total = total
        self.entities = entities
        self.aggregations = aggregations or {}
        self.criteria = criteria
        self.context = context

    def assign(self, **values: Any) -> "EntitySearchResult":
        for key, value in values.items():
            if not hasattr(self, key):
                raise AttributeError(f"{self.__class__.__name__} has no attribute {key!r}")
            setattr(self, key, value)
        return self

    def __iter__(self):
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    def __repr__(self) -> str:
        return f"EntitySearchResult(entity={self.entity!r}, total={self.total}, elements={len(self.entities)})"
