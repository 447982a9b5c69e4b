"""
The composed public-to-stable lookup table produced by the mappings pipeline.
"""

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple


def _dotted(class_name: str) -> str:
    return class_name.replace("/", ".")


class ComposedMappingTable:
    """
    Immutable lookup from public member names to stable intermediate names.

    Methods map to an ordered tuple of stable names, since one public name can
    cover several obfuscated overloads. Fields map to exactly one stable name.
    Both indexes are keyed by dot-separated public class names.
    """

    def __init__(
        self,
        methods: Dict[str, Dict[str, List[str]]],
        fields: Dict[str, Dict[str, str]],
    ):
        self._methods = MappingProxyType(
            {
                cls: MappingProxyType({name: tuple(stable) for name, stable in members.items()})
                for cls, members in methods.items()
                if members
            }
        )
        self._fields = MappingProxyType(
            {cls: MappingProxyType(dict(members)) for cls, members in fields.items() if members}
        )

    @property
    def methods(self) -> Mapping[str, Mapping[str, Tuple[str, ...]]]:
        return self._methods

    @property
    def fields(self) -> Mapping[str, Mapping[str, str]]:
        return self._fields

    def map_method(self, class_name: str, name: str) -> Tuple[str, ...]:
        """
        Returns the stable names of a public method, or an empty tuple if it is not renamed.
        """
        members = self._methods.get(_dotted(class_name))
        if members is None:
            return ()
        return members.get(name, ())

    def map_field(self, class_name: str, name: str) -> Optional[str]:
        """
        Returns the stable name of a public field, or None if it is not renamed.
        """
        members = self._fields.get(_dotted(class_name))
        if members is None:
            return None
        return members.get(name)

    def classes(self) -> List[str]:
        """Every class with at least one renamed member, in discovery order."""
        seen = dict.fromkeys(self._methods)
        seen.update(dict.fromkeys(self._fields))
        return list(seen)

    def to_dict(self) -> Dict[str, Dict[str, dict]]:
        """
        Returns a plain nested copy: `{class: {"methods": {name: [stable...]}, "fields": {name: stable}}}`.
        """
        out = {}
        for cls in self.classes():
            out[cls] = {
                "methods": {name: list(stable) for name, stable in self._methods.get(cls, {}).items()},
                "fields": dict(self._fields.get(cls, {})),
            }
        return out

    def __contains__(self, class_name: object) -> bool:
        if not isinstance(class_name, str):
            return False
        dotted = _dotted(class_name)
        return dotted in self._methods or dotted in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.classes())

    def __len__(self) -> int:
        return len(self.classes())

    def __repr__(self) -> str:
        return (
            f"ComposedMappingTable(method_classes={len(self._methods)}, "
            f"field_classes={len(self._fields)})"
        )
