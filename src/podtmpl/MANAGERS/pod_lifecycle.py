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
Dispatch of the six podtmpl modes to manifest work and external commands.
"""
import tempfile
from typing import Optional

import click

from ..MODELS.pod_manifest import PodManifest
from ..MODELS.run_config import Mode, PodConfig
from ..PARSERS.template_parser import TemplateParser
from ..REGISTRY.image_fetcher import ImageFetcher, RktImageFetcher
from ..RUNNERS.process_runner import ProcessRunner
from ..CONVERTERS.to_manifest import ManifestSerializer
from ..CONVERTERS.to_systemd import STDIN_MANIFEST, SystemdCommands, extract_machine_name, rkt_run_command
from ..errors import ExecutionError
from .manifest_pipeline import ManifestPipeline

TEMP_PREFIX = "pod-manifest"


class PodLifecycle:
    """
    Performs exactly one terminal action per invocation.
    """
    def __init__(self,
                 config: PodConfig,
                 runner: Optional[ProcessRunner] = None,
                 fetcher: Optional[ImageFetcher] = None):
        """
        Initializes the dispatcher.

        :param config: Configuration of this invocation.
        :param runner: Executes external commands, defaults to a sudo-aware runner.
        :param fetcher: Resolves missing image IDs, defaults to ``rkt fetch``.
        """
        self.config = config
        self.runner = runner or ProcessRunner(sudo=config.sudo)
        self.fetcher = fetcher or RktImageFetcher(self.runner)
        self.systemd = SystemdCommands(config.name, config.slice)

    def dispatch(self, mode: Mode) -> None:
        """
        Runs the action selected by ``mode``.

        :param mode: The selected mode.
        :raises PodTemplateError: If any step fails.
        """
        self.config.require_name(mode)
        getattr(self, mode.value)()

    def prepare(self) -> PodManifest:
        """
        Builds the finalized manifest from the configured template.
        """
        parser = TemplateParser(env_files=self.config.env_files, interpolate=self.config.interpolate)
        pipeline = ManifestPipeline(self.fetcher, parser)
        return pipeline.prepare(self.config.template_path, self.config.base_path)

    def compile(self) -> None:
        """Writes the manifest to the configured output."""
        manifest = self.prepare()
        ManifestSerializer().write(manifest, self.config.out)

    def run(self) -> None:
        """
        Runs the pod in the foreground with the manifest piped to rkt.
        """
        manifest = self.prepare()
        payload = ManifestSerializer(indent=None).to_bytes(manifest)
        self.runner.run(rkt_run_command(STDIN_MANIFEST, self.config.extra_args), input=payload)

    def start(self) -> None:
        """
        Replaces any running unit of this name with a transient unit running the pod.
        """
        manifest = self.prepare()
        self.stop()

        with tempfile.NamedTemporaryFile("w", prefix=TEMP_PREFIX, delete=False) as f:
            f.write(ManifestSerializer(indent=None).dumps(manifest))
            manifest_path = f.name

        self.runner.run(self.systemd.start(manifest_path, self.config.extra_args), capture=True)
        click.echo(f"[{self.config.name}] Started {self.systemd.unit} from {manifest_path}", err=True)

    def stop(self) -> None:
        """
        Stops the unit; a unit that is not loaded is not an error.
        """
        for command in self.systemd.stop():
            result = self.runner.run(command, check=False)
            if result.returncode != 0:
                click.echo(f"[{self.config.name}] Ignoring exit status {result.returncode} of {command[1]}", err=True)

    def status(self) -> None:
        self.runner.run(self.systemd.status())

    def logs(self) -> None:
        """
        Shows the journal of the pod's machine, passing extra flags to journalctl.
        """
        result = self.runner.run(self.systemd.status(), capture=True, check=False)
        machine = extract_machine_name(result.stdout or "")
        if machine is None:
            raise ExecutionError(
                self.systemd.status(), result.returncode or 1,
                f"no running rkt pod found in {self.systemd.unit}")
        self.runner.run(self.systemd.journal(machine, self.config.extra_args))
