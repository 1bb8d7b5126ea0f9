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
Command lines for running pods under systemd and reading their journals.
"""
import re
from typing import List, Optional, Sequence

STDIN_MANIFEST = "/dev/stdin"

# rkt registers each pod with systemd-machined as rkt-<pod uuid>.
MACHINE_PATTERN = re.compile(r"rkt-[a-f0-9-]+")


def rkt_run_command(manifest_path: str, extra_args: Sequence[str] = ()) -> List[str]:
    """
    Builds ``rkt run`` for a manifest file.

    :param manifest_path: Path rkt reads the manifest from.
    :param extra_args: Flags passed through to rkt.
    :return: The argument vector.
    """
    return ["rkt", "run", f"--pod-manifest={manifest_path}"] + list(extra_args)


def extract_machine_name(status_output: str) -> Optional[str]:
    """
    Finds the machine name of a running rkt pod in ``systemctl status`` output.

    :param status_output: Text printed by ``systemctl status <unit>``.
    :return: The first ``rkt-<uuid>`` name, or None if the pod is not running.
    """
    match = MACHINE_PATTERN.search(status_output)
    return match.group(0) if match else None


class SystemdCommands:
    """
    Builds the systemd command lines that supervise one named pod.
    """

    def __init__(self, name: str, slice: str = ""):
        """
        Initializes the builder.

        :param name: Pod name, used as the transient unit name.
        :param slice: Slice the unit is placed in, empty for systemd's default.
        """
        self.name = name
        self.slice = slice

    @property
    def unit(self) -> str:
        return f"{self.name}.service"

    def start(self, manifest_path: str, extra_args: Sequence[str] = ()) -> List[str]:
        """
        ``systemd-run`` launching rkt as a transient service unit.
        """
        command = ["systemd-run", "--unit", self.name]
        if self.slice:
            command += ["--slice", self.slice]
        return command + rkt_run_command(manifest_path, extra_args)

    def stop(self) -> List[List[str]]:
        """
        Stops the unit and clears its failed state so the name can be reused.
        """
        return [
            ["systemctl", "stop", self.unit],
            ["systemctl", "reset-failed", self.unit],
        ]

    def status(self) -> List[str]:
        return ["systemctl", "status", self.unit, "--no-pager"]

    def journal(self, machine: str, extra_args: Sequence[str] = ()) -> List[str]:
        """
        ``journalctl`` reading the journal of the pod's machine.
        """
        return ["journalctl", "-M", machine] + list(extra_args)
