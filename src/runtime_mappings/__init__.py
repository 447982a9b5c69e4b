"""
This module exports the runtime mappings provider and its configuration.
"""

from .mappings_config import Distribution, MappingsConfig
from .mappings_exceptions import (
    FormatError,
    IntegrityError,
    MappingsException,
    TransportError,
    UnknownVersionError,
)
from .mappings_logger import MappingsLogger
from .mappings_provider import MappingsProvider, PipelineState
from .mapping_models import ComposedMappingTable

__all__ = [
    "ComposedMappingTable",
    "Distribution",
    "FormatError",
    "IntegrityError",
    "MappingsConfig",
    "MappingsException",
    "MappingsLogger",
    "MappingsProvider",
    "PipelineState",
    "TransportError",
    "UnknownVersionError",
]
