"""
Default locations used by the runtime mappings pipeline.
"""

import os
import pathlib


class MappingsSettings:
    """
    Provides the default data root under which per-version caches are stored.
    """

    HOME_ENV_VAR = "RUNTIME_MAPPINGS_HOME"

    @staticmethod
    def get_data_root() -> str:
        """
        Returns the directory under which each runtime version gets its own cache directory.
        """
        override = os.environ.get(MappingsSettings.HOME_ENV_VAR)
        if override:
            return str(pathlib.Path(override).expanduser())
        return str(pathlib.Path.home() / ".runtime_mappings")
