"""
Query string encoding for list / get options.

`Query` keeps repeated keys (e.g. several `fields[]`) and encodes them in a
stable order: keys sorted, values of one key in insertion order.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Union, runtime_checkable
from urllib.parse import parse_qsl, urlencode


@runtime_checkable
class QueryEncoder(Protocol):
    def encode(self) -> str: ...


class Query:

    def __init__(self, params: Optional[Mapping[str, Any]] = None):
        self._params: Dict[str, List[str]] = {}
        if params:
            for key, value in params.items():
                if isinstance(value, (list, tuple)):
                    self.extend(key, value)
                else:
                    self.add(key, value)

    @classmethod
    def parse(cls, qs: str) -> "Query":
        q = cls()
        for k, v in parse_qsl(qs, keep_blank_values=True):
            q.add(k, v)
        return q

    def add(self, key: str, value: Any) -> "Query":
        self._params.setdefault(key, []).append(str(value))
        return self

    def extend(self, key: str, values: Iterable[Any]) -> "Query":
        for v in values:
            self.add(key, v)
        return self

    def set(self, key: str, value: Any) -> "Query":
        self._params[key] = [str(value)]
        return self

    def get(self, key: str) -> List[str]:
        return list(self._params.get(key, []))

    def copy(self) -> "Query":
        q = Query()
        q._params = {k: list(v) for k, v in self._params.items()}
        return q

    def encode(self) -> str:
        pairs = [(k, v) for k in sorted(self._params) for v in self._params[k]]
        return urlencode(pairs)

    def __bool__(self) -> bool:
        return any(self._params.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        return self.encode() == other.encode()

    def __repr__(self) -> str:
        return f"Query({self.encode()!r})"

    # Airtable list options
    def fields(self, *names: str) -> "Query":
        return self.extend("fields[]", names)

    def filter_by_formula(self, formula: str) -> "Query":
        return self.set("filterByFormula", formula)

    def max_records(self, n: int) -> "Query":
        return self.set("maxRecords", int(n))

    def page_size(self, n: int) -> "Query":
        return self.set("pageSize", int(n))

    def view(self, name: str) -> "Query":
        return self.set("view", name)

    def offset(self, cursor: str) -> "Query":
        return self.set("offset", cursor)

    def sort(self, field: str, direction: str = "asc") -> "Query":
        """Append a sort clause; clauses apply in the order they were added."""
        if direction not in ("asc", "desc"):
            raise ValueError(f"sort direction must be 'asc' or 'desc', got {direction!r}")
        i = sum(1 for k in self._params if k.startswith("sort[") and k.endswith("][field]"))
        self.set(f"sort[{i}][field]", field)
        self.set(f"sort[{i}][direction]", direction)
        return self


Options = Union[None, QueryEncoder, Mapping[str, Any]]


def encode_options(options: Options) -> str:
    """Encode None, a QueryEncoder or a plain mapping into a query string."""
    if options is None:
        return ""
    if isinstance(options, QueryEncoder):
        return options.encode()
    return Query(options).encode()
