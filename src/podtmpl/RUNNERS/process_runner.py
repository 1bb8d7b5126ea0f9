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
Execution of external commands for the container runtime and systemd.
"""
import shlex
import subprocess
from typing import List, Optional, Sequence

import click

from ..errors import ExecutionError

SUDO = "sudo"


class ProcessRunner:
    """
    Runs a single external command to completion, optionally behind sudo.

    Every process podtmpl starts goes through this class, so tests can
    substitute a recording fake.
    """
    def __init__(self, name: str = "podtmpl", sudo: bool = True):
        """
        Initializes the process runner.

        Args:
            name (str): Prefix for progress messages.
            sudo (bool): Whether commands are run with elevated privileges.
        """
        self.name = name
        self.sudo = sudo

    def command_line(self, command: Sequence[str]) -> List[str]:
        """
        Returns the argument vector actually executed for ``command``.
        """
        if self.sudo:
            return [SUDO] + list(command)
        return list(command)

    def run(self,
            command: Sequence[str],
            input: Optional[bytes] = None,
            capture: bool = False,
            check: bool = True) -> subprocess.CompletedProcess:
        """
        Runs the command and waits for it to exit.

        Args:
            command (Sequence[str]): Command and arguments, without sudo.
            input (Optional[bytes]): Data piped to the child's stdin.
            capture (bool): Capture stdout instead of passing it to the terminal.
            check (bool): Raise on a non-zero exit status.

        Returns:
            subprocess.CompletedProcess: The finished process; ``stdout`` is
            text when captured.

        Raises:
            ExecutionError: If the command cannot be started, or exits
            non-zero while ``check`` is set.
        """
        argv = self.command_line(command)
        click.echo(f"[{self.name}] Running: {shlex.join(argv)}", err=True)

        try:
            result = self._execute(argv, input, capture)
        except OSError as e:
            raise ExecutionError(argv, 127, f"cannot execute {argv[0]}: {e.strerror or e}") from e

        if isinstance(result.stdout, bytes):
            result.stdout = result.stdout.decode("utf-8", errors="replace")

        if check and result.returncode != 0:
            raise ExecutionError(argv, result.returncode)
        return result

    def _execute(self, argv: List[str], input: Optional[bytes], capture: bool) -> subprocess.CompletedProcess:
        return subprocess.run(
            argv,
            input=input,
            stdout=subprocess.PIPE if capture else None,
            shell=False,
        )
