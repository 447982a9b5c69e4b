"""
Parsers for the two symbol table formats consumed by the composer.

The official table is published in the ProGuard text format and the
intermediate table is published as TSRG (v1 or v2).
"""

import re
from typing import Iterable, List

from runtime_mappings.mappings_exceptions import FormatError
from runtime_mappings.mapping_composer.mapping_file import (
    ClassMapping,
    FieldMapping,
    MappingFile,
    MethodMapping,
)

PRIMITIVES = {
    "byte": "B",
    "char": "C",
    "double": "D",
    "float": "F",
    "int": "I",
    "long": "J",
    "short": "S",
    "boolean": "Z",
    "void": "V",
}

_LINE_RANGE_PREFIX = re.compile(r"^\d+:\d+:")
_LINE_RANGE_SUFFIX = re.compile(r"(:\d+)+$")


def java_type_to_descriptor(java_type: str) -> str:
    """
    Converts a Java source type name to its descriptor, e.g. `java.lang.String[]` to `[Ljava/lang/String;`.
    """
    java_type = java_type.strip()
    dims = 0
    while java_type.endswith("[]"):
        dims += 1
        java_type = java_type[:-2]
    if not java_type:
        raise ValueError("empty type name")
    if java_type in PRIMITIVES:
        base = PRIMITIVES[java_type]
    else:
        base = "L" + java_type.replace(".", "/") + ";"
    return "[" * dims + base


def _strip_comment(line: str) -> str:
    index = line.find("#")
    return line if index < 0 else line[:index]


def parse_proguard(lines: Iterable[str]) -> MappingFile:
    """
    Parse a ProGuard mapping file mapping public names (original) to obfuscated names (mapped).

    Raises:
        FormatError: on a malformed line
    """
    mappings = MappingFile()
    current = None

    for lineno, raw in enumerate(lines, start=1):
        line = _strip_comment(raw.rstrip("\r\n"))
        if not line.strip():
            continue

        if not line[0].isspace():
            if not line.endswith(":") or " -> " not in line:
                raise FormatError(f"Invalid class mapping on line {lineno}: {raw.strip()}")
            original, mapped = line[:-1].split(" -> ", 1)
            current = mappings.add_class(
                ClassMapping(original.strip().replace(".", "/"), mapped.strip().replace(".", "/"))
            )
            continue

        if current is None:
            raise FormatError(f"Member mapping before any class on line {lineno}: {raw.strip()}")

        member = line.strip()
        if " -> " not in member:
            raise FormatError(f"Invalid member mapping on line {lineno}: {member}")
        left, mapped = member.rsplit(" -> ", 1)

        try:
            if "(" in left:
                current.add_method(_parse_proguard_method(left, mapped.strip()))
            else:
                java_type, name = left.split()
                current.add_field(FieldMapping(name, mapped.strip(), java_type_to_descriptor(java_type)))
        except ValueError as e:
            raise FormatError(f"Invalid member mapping on line {lineno}: {member} ({e})") from e

    return mappings


def _parse_proguard_method(left: str, mapped: str) -> MethodMapping:
    left = _LINE_RANGE_PREFIX.sub("", left)
    left = _LINE_RANGE_SUFFIX.sub("", left)
    if not left.endswith(")"):
        raise ValueError("missing closing parenthesis")
    signature, args = left[:-1].split("(", 1)
    return_type, name = signature.split()
    arg_types = [arg for arg in args.split(",") if arg.strip()]
    descriptor = (
        "("
        + "".join(java_type_to_descriptor(arg) for arg in arg_types)
        + ")"
        + java_type_to_descriptor(return_type)
    )
    return MethodMapping(name, descriptor, mapped)


def parse_tsrg(lines: Iterable[str]) -> MappingFile:
    """
    Parse a TSRG v1 or v2 file. The first namespace is the original one and the second the mapped one.

    Raises:
        FormatError: on a malformed line
    """
    mappings = MappingFile()
    current = None
    namespaces = 2
    version = 1
    first = True

    for lineno, raw in enumerate(lines, start=1):
        line = _strip_comment(raw.rstrip("\r\n"))
        if not line.strip():
            continue

        is_first, first = first, False
        if is_first and line.startswith("tsrg2 "):
            version = 2
            namespaces = len(line.split()) - 1
            if namespaces < 2:
                raise FormatError(f"TSRG2 header needs at least two namespaces: {line}")
            continue

        depth = len(line) - len(line.lstrip("\t"))
        tokens: List[str] = line.split()

        if depth == 0:
            if version == 1 and tokens[0].endswith("/"):
                # package mapping
                continue
            if len(tokens) != namespaces:
                raise FormatError(f"Invalid class mapping on line {lineno}: {line}")
            current = mappings.add_class(ClassMapping(tokens[0], tokens[1]))
            continue

        if current is None:
            raise FormatError(f"Member mapping before any class on line {lineno}: {line.strip()}")

        if depth > 1:
            # TSRG2 parameters and the static marker belong to the enclosing method
            if version == 2:
                continue
            raise FormatError(f"Unexpected indentation on line {lineno}: {line.strip()}")

        if version == 2 and len(tokens) == 1 and tokens[0] == "static":
            continue

        if len(tokens) == namespaces:
            current.add_field(FieldMapping(tokens[0], tokens[1]))
        elif len(tokens) == namespaces + 1 and tokens[1].startswith("("):
            current.add_method(MethodMapping(tokens[0], tokens[1], tokens[2]))
        elif len(tokens) == namespaces + 1 and version == 2:
            current.add_field(FieldMapping(tokens[0], tokens[2], tokens[1]))
        else:
            raise FormatError(f"Invalid member mapping on line {lineno}: {line.strip()}")

    return mappings
