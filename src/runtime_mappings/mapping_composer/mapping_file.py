"""
In-memory model of a class/member renaming table.

Both the official and the intermediate tables are loaded into this model.
Class names use the slash-separated internal form and method descriptors use
the JVM descriptor syntax of the `original` namespace.
"""

import dataclasses
import re
from typing import Dict, Iterator, Optional, Tuple

_CLASS_IN_DESCRIPTOR = re.compile(r"L([^;]+);")


@dataclasses.dataclass(frozen=True)
class MethodMapping:
    original: str
    descriptor: str
    mapped: str


@dataclasses.dataclass(frozen=True)
class FieldMapping:
    original: str
    mapped: str
    descriptor: Optional[str] = None


class ClassMapping:
    """
    A renamed class with its renamed methods and fields, in file order.
    """

    def __init__(self, original: str, mapped: str):
        self.original = original
        self.mapped = mapped
        self._methods: Dict[Tuple[str, str], MethodMapping] = {}
        self._fields: Dict[str, FieldMapping] = {}

    @property
    def methods(self) -> Iterator[MethodMapping]:
        return iter(self._methods.values())

    @property
    def fields(self) -> Iterator[FieldMapping]:
        return iter(self._fields.values())

    def add_method(self, method: MethodMapping) -> None:
        # first declaration wins; ProGuard repeats methods once per inlined line range
        self._methods.setdefault((method.original, method.descriptor), method)

    def add_field(self, field: FieldMapping) -> None:
        self._fields.setdefault(field.original, field)

    def get_method(self, name: str, descriptor: str) -> Optional[MethodMapping]:
        return self._methods.get((name, descriptor))

    def get_field(self, name: str) -> Optional[FieldMapping]:
        return self._fields.get(name)

    def __repr__(self) -> str:
        return f"ClassMapping({self.original} -> {self.mapped})"


class MappingFile:
    """
    A renaming table, indexed by original class name.
    """

    def __init__(self):
        self._classes: Dict[str, ClassMapping] = {}

    @property
    def classes(self) -> Iterator[ClassMapping]:
        return iter(self._classes.values())

    def add_class(self, clazz: ClassMapping) -> ClassMapping:
        return self._classes.setdefault(clazz.original, clazz)

    def get_class(self, original: str) -> Optional[ClassMapping]:
        return self._classes.get(original)

    def remap_class(self, name: str) -> str:
        clazz = self._classes.get(name)
        return clazz.mapped if clazz is not None else name

    def remap_descriptor(self, descriptor: str) -> str:
        """
        Rewrites every class reference in a descriptor into the mapped namespace.
        """
        return _CLASS_IN_DESCRIPTOR.sub(lambda m: f"L{self.remap_class(m.group(1))};", descriptor)

    def reverse(self) -> "MappingFile":
        """
        Returns the same table with the original and mapped namespaces swapped.
        """
        reversed_file = MappingFile()
        for clazz in self.classes:
            out = reversed_file.add_class(ClassMapping(clazz.mapped, clazz.original))
            for method in clazz.methods:
                out.add_method(
                    MethodMapping(method.mapped, self.remap_descriptor(method.descriptor), method.original)
                )
            for field in clazz.fields:
                descriptor = self.remap_descriptor(field.descriptor) if field.descriptor else None
                out.add_field(FieldMapping(field.mapped, field.original, descriptor))
        return reversed_file

    def __len__(self) -> int:
        return len(self._classes)
