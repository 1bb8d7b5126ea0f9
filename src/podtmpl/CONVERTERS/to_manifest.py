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
Serialization of pod manifests to the JSON rkt reads.
"""
import json
from typing import Optional

import click

from ..MODELS.pod_manifest import PodManifest
from ..errors import ManifestWriteError

STDOUT = "-"


class ManifestSerializer:
    """
    Encodes pod manifests as JSON documents.
    """

    def __init__(self, indent: Optional[int] = 2):
        """
        Initializes the serializer.

        :param indent: Spaces per nesting level, ``None`` for a single line.
        """
        self.indent = indent

    def dumps(self, manifest: PodManifest) -> str:
        """
        Encodes the manifest, terminated by a newline.

        :param manifest: The manifest to encode.
        :return: The JSON document.
        """
        data = manifest.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(data, indent=self.indent) + "\n"

    def to_bytes(self, manifest: PodManifest) -> bytes:
        """
        Encodes the manifest for piping into a child process.
        """
        return self.dumps(manifest).encode("utf-8")

    def write(self, manifest: PodManifest, destination: Optional[str] = None) -> None:
        """
        Writes the manifest to a file or to standard output.

        :param manifest: The manifest to write.
        :param destination: Output path; ``None`` or ``-`` means stdout.
        :raises ManifestWriteError: If the destination cannot be written.
        """
        content = self.dumps(manifest)
        if destination is None or destination == STDOUT:
            click.echo(content, nl=False)
            return

        try:
            with open(destination, "w") as f:
                f.write(content)
        except OSError as e:
            raise ManifestWriteError(f"cannot write manifest to {destination}: {e.strerror or e}") from e
