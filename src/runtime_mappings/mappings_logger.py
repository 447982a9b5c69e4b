"""
Structured logger used by every component of the runtime mappings pipeline.
"""

import inspect
import logging
from datetime import datetime

from pydantic import BaseModel


class LogLine(BaseModel):
    """
    Represents a line in the runtime mappings log
    """

    time: str
    level: str
    caller_file: str
    caller_name: str
    caller_line: int
    message: str


class MappingsLogger:
    """
    Logger class
    """

    def __init__(self, name: str = "runtime_mappings") -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

    def log(self, debug_message: str, level: int) -> None:
        """
        Log the debug message as a single JSON line, tagged with the caller's location.
        """
        debug_message = debug_message.replace("\n", " ")

        # Collect details about the callee
        curframe = inspect.currentframe()
        calframe = inspect.getouterframes(curframe, 2)
        caller_file = calframe[1][1].split("/")[-1]
        caller_line = calframe[1][2]
        caller_name = calframe[1][3]

        log_line = LogLine(
            time=str(datetime.now()),
            level=logging.getLevelName(level),
            caller_file=caller_file,
            caller_name=caller_name,
            caller_line=caller_line,
            message=debug_message,
        )

        self.logger.log(level=level, msg=log_line.model_dump_json())
