"""
Runtime mappings composer.

This package handles:
1. Parsing the official (ProGuard) and intermediate (TSRG) tables
2. Joining them over the obfuscated names into the composed lookup table
"""

from .composer import MappingComposer, compose_tables
from .mapping_file import ClassMapping, FieldMapping, MappingFile, MethodMapping
from .parsers import parse_proguard, parse_tsrg

__all__ = [
    "MappingComposer",
    "compose_tables",
    "ClassMapping",
    "FieldMapping",
    "MappingFile",
    "MethodMapping",
    "parse_proguard",
    "parse_tsrg",
]
