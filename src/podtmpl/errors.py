# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Exception hierarchy shared by every stage of the pod workflow.

Library code raises these; only the CLI catches them and turns them into
a single diagnostic line and an exit status.
"""
from typing import Optional, Sequence


class PodTemplateError(Exception):
    """
    Base class for all podtmpl failures.

    :param message: Human readable description of the failing step.
    :param exit_code: Process exit status the CLI should terminate with.
    """
    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(PodTemplateError):
    """Invalid or incomplete command line configuration."""
    exit_code = 2


class TemplateError(PodTemplateError):
    """The pod template is missing, malformed or does not fit the manifest shape."""


class FetchError(PodTemplateError):
    """An image could not be fetched or its identifier could not be parsed."""


class PathResolutionError(PodTemplateError):
    """A volume source could not be resolved to an absolute path."""


class ManifestWriteError(PodTemplateError):
    """The serialized manifest could not be written to its destination."""


class ExecutionError(PodTemplateError):
    """
    An external process exited with a non-zero status.

    The child's return code becomes the exit code of the tool.
    """

    def __init__(self, command: Sequence[str], returncode: int, message: Optional[str] = None):
        self.command = list(command)
        self.returncode = returncode
        if message is None:
            message = f"command '{' '.join(self.command)}' exited with status {returncode}"
        super().__init__(message, exit_code=returncode if returncode > 0 else 1)
