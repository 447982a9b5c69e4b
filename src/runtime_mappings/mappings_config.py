"""
Configuration parameters for the runtime mappings pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum

from runtime_mappings.mappings_settings import MappingsSettings

PISTON_META = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
MCP_CONFIG_URL_TEMPLATE = (
    "https://maven.minecraftforge.net/de/oceanlabs/mcp/mcp_config/"
    "{runtime_version}-{build_id}/mcp_config-{runtime_version}-{build_id}.zip"
)
JOINED_PATH = "config/joined.tsrg"


class Distribution(str, Enum):
    """
    The binary the mappings are resolved for.
    """

    CLIENT = "client"
    SERVER = "server"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "Distribution":
        normalized = value.strip().lower()
        if normalized == "dedicated_server":
            return cls.SERVER
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown distribution: {value}")


@dataclass
class MappingsConfig:
    """
    Configuration parameters
    """

    runtime_version: str
    build_id: str
    distribution: Distribution = Distribution.CLIENT
    data_root: str = field(default_factory=MappingsSettings.get_data_root)
    manifest_url: str = PISTON_META
    archive_url_template: str = MCP_CONFIG_URL_TEMPLATE
    archive_entry: str = JOINED_PATH
    connect_timeout: float = 10.0
    read_timeout: float = 60.0

    @property
    def archive_url(self) -> str:
        """The intermediate archive URL for this runtime version and build."""
        return self.archive_url_template.format(
            runtime_version=self.runtime_version, build_id=self.build_id
        )

    @property
    def timeout(self):
        return (self.connect_timeout, self.read_timeout)

    @classmethod
    def from_dict(cls, env: dict):
        """
        Create a MappingsConfig instance from a dictionary
        """
        values = {k: v for k, v in env.items() if k in cls.__dataclass_fields__}
        distribution = values.get("distribution")
        if isinstance(distribution, str) and not isinstance(distribution, Distribution):
            values["distribution"] = Distribution.parse(distribution)
        return cls(**values)
