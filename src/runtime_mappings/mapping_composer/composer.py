"""
Composes the official and intermediate tables into the public-to-stable lookup table.
"""

import io
import logging
import zipfile
from typing import Dict, List

from runtime_mappings.mappings_config import MappingsConfig
from runtime_mappings.mappings_exceptions import FormatError
from runtime_mappings.mappings_logger import MappingsLogger
from runtime_mappings.mapping_cache import ArtifactKind, CacheStore
from runtime_mappings.mapping_composer.mapping_file import MappingFile
from runtime_mappings.mapping_composer.parsers import parse_proguard, parse_tsrg
from runtime_mappings.mapping_models import ComposedMappingTable


def compose_tables(official: MappingFile, intermediate: MappingFile) -> ComposedMappingTable:
    """
    Join the two tables over their shared obfuscated names.

    Args:
        official: The official table reversed, so original names are obfuscated and mapped names are public
        intermediate: The intermediate table, original names obfuscated and mapped names stable

    Returns:
        The composed table keyed by dot-separated public class names
    """
    methods_map: Dict[str, Dict[str, List[str]]] = {}
    fields_map: Dict[str, Dict[str, str]] = {}

    for clazz in official.classes:
        obf = clazz.original
        srg_class = intermediate.get_class(obf)
        if srg_class is None:
            continue

        dotted = clazz.mapped.replace("/", ".")
        methods: Dict[str, List[str]] = {}
        fields: Dict[str, str] = {}

        for method in clazz.methods:
            srg_method = srg_class.get_method(method.original, method.descriptor)
            if srg_method is None or srg_method.mapped in (method.original, method.mapped):
                continue
            stable = methods.setdefault(method.mapped, [])
            if srg_method.mapped not in stable:
                stable.append(srg_method.mapped)

        for field in clazz.fields:
            srg_field = srg_class.get_field(field.original)
            if srg_field is None or srg_field.mapped in (field.original, field.mapped):
                continue
            fields[field.mapped] = srg_field.mapped

        if methods:
            methods_map[dotted] = methods
        if fields:
            fields_map[dotted] = fields

    return ComposedMappingTable(methods_map, fields_map)


class MappingComposer:
    """
    Loads both tables from a complete cache and composes them.
    """

    def __init__(self, config: MappingsConfig, logger: MappingsLogger, cache_store: CacheStore):
        self.config = config
        self.logger = logger
        self.cache_store = cache_store

    def load_official(self) -> MappingFile:
        """
        Parse the cached official table, reversed so obfuscated names are the originals.
        """
        path = self.cache_store.path(ArtifactKind.OFFICIAL)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return parse_proguard(f).reverse()
        except (OSError, UnicodeDecodeError) as e:
            raise FormatError(f"Cannot read official mappings at {path}: {e}") from e

    def load_intermediate(self) -> MappingFile:
        """
        Parse the intermediate table from its fixed entry in the cached archive.

        Raises:
            FormatError: if the archive is corrupt or lacks the entry
        """
        path = self.cache_store.path(ArtifactKind.INTERMEDIATE)
        entry = self.config.archive_entry
        try:
            with zipfile.ZipFile(path) as archive:
                try:
                    raw = archive.open(entry)
                except KeyError as e:
                    raise FormatError(f"Archive {path} has no entry {entry}") from e
                with raw, io.TextIOWrapper(raw, encoding="utf-8") as text:
                    return parse_tsrg(text)
        except (OSError, UnicodeDecodeError, zipfile.BadZipFile) as e:
            raise FormatError(f"Cannot read intermediate archive at {path}: {e}") from e

    def compose(self) -> ComposedMappingTable:
        intermediate = self.load_intermediate()
        official = self.load_official()
        table = compose_tables(official, intermediate)
        self.logger.log(
            f"Composed mappings for {len(table)} classes "
            f"({len(table.methods)} with methods, {len(table.fields)} with fields)",
            logging.INFO,
        )
        return table
