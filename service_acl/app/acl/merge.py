"""
Rule merging for guard calls.
"""

from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple


class OrderedRules:
    """Ordered ``key -> allow`` association with delete-then-append upserts.

    Keys stay unique; re-declaring a key moves it to the tail with the new
    value.
    """

    def __init__(self, rules: Optional[Iterable[Tuple[Hashable, bool]]] = None):
        self._rules: Dict[Hashable, bool] = {}
        for key, allow in rules or ():
            self.upsert_to_tail(key, allow)

    def upsert_to_tail(self, key: Hashable, allow: bool):
        self._rules.pop(key, None)
        self._rules[key] = bool(allow)

    def extend(self, rules: Iterable[Tuple[Hashable, bool]]):
        for key, allow in rules:
            self.upsert_to_tail(key, allow)

    def keys(self) -> List[Hashable]:
        return list(self._rules)

    def items(self) -> List[Tuple[Hashable, bool]]:
        return list(self._rules.items())

    def __contains__(self, key) -> bool:
        return key in self._rules

    def __getitem__(self, key) -> bool:
        return self._rules[key]

    def __iter__(self) -> Iterator[Tuple[Hashable, bool]]:
        return iter(list(self._rules.items()))

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self):
        return f"OrderedRules({self.items()!r})"


def merge_rules(*rule_lists: Iterable[Tuple[Hashable, bool]]) -> OrderedRules:
    """Merge rule lists in the given order, last declaration wins."""
    merged = OrderedRules()
    for rules in rule_lists:
        merged.extend(rules)
    return merged
