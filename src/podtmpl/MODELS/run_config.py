"""
Models for the process-wide run configuration.
"""
from typing import Optional, Tuple
from enum import Enum
from pydantic import BaseModel, ConfigDict

from ..errors import ConfigError

DEFAULT_TEMPLATE = "pod-template.yaml"
DEFAULT_BASE = "./"


class Mode(str, Enum):
    """
    The single action a podtmpl invocation performs.
    """
    COMPILE = "compile"
    RUN = "run"
    START = "start"
    STOP = "stop"
    STATUS = "status"
    LOGS = "logs"

    @property
    def needs_name(self) -> bool:
        """Background modes address a systemd unit and need a pod name."""
        return self in (Mode.START, Mode.STOP, Mode.STATUS, Mode.LOGS)


class PodConfig(BaseModel):
    """
    Immutable configuration built once from the command line.
    """
    model_config = ConfigDict(frozen=True)

    template_path: str = DEFAULT_TEMPLATE
    base_path: str = DEFAULT_BASE
    name: str = ""
    slice: str = ""
    out: Optional[str] = None  # None writes to stdout
    extra_args: Tuple[str, ...] = ()
    env_files: Tuple[str, ...] = ()
    interpolate: bool = False
    sudo: bool = True

    def require_name(self, mode: Mode) -> None:
        """
        Fails when ``mode`` works on a background unit and no pod name is set.

        :param mode: The selected mode.
        :raises ConfigError: If the name is required but empty.
        """
        if mode.needs_name and not self.name:
            raise ConfigError("you must specify --name when working with pods in background")

    @property
    def unit(self) -> str:
        """Name of the systemd service unit supervising the pod."""
        return f"{self.name}.service"
