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
Pull references and content identifiers for pod images.

A pull reference is assembled from the image name and its ``schema`` and
``version`` labels, e.g. ``docker://`` + ``nginx`` + ``:`` + ``1.21``.
A content identifier is what ``rkt fetch`` prints, e.g. ``sha512-4c8f...``.
"""

from dataclasses import dataclass

from ..MODELS.pod_manifest import RuntimeImage

DOCKER_SCHEMA = "docker://"
HASH_TYPE = "sha512"


@dataclass
class PullReference:
    """
    Reference handed to the image fetcher.

    Examples:
        - name=nginx, schema=docker://, version=latest -> docker://nginx:latest
        - name=coreos.com/etcd, version=v3.1.7 -> coreos.com/etcd:v3.1.7
    """

    name: str
    schema: str = ""
    version: str = ""

    @classmethod
    def from_image(cls, image: RuntimeImage) -> "PullReference":
        """
        Build the reference from an image's name and labels.

        Args:
            image: The runtime image of an app.

        Returns:
            The pull reference.
        """
        return cls(name=image.name, schema=image.label("schema"), version=image.label("version"))

    @property
    def insecure(self) -> bool:
        """Docker images carry no appc signature and must be fetched unverified."""
        return self.schema == DOCKER_SCHEMA

    def __str__(self) -> str:
        return f"{self.schema}{self.name}:{self.version}"


@dataclass(frozen=True)
class ImageID:
    """
    Content-addressed image identifier of the form ``<type>-<value>``.
    """

    type: str
    value: str

    @classmethod
    def parse(cls, raw: str) -> "ImageID":
        """
        Parse an identifier, tolerating the trailing newline a command prints.

        Args:
            raw: Identifier text, e.g. ``sha512-abc...\\n``.

        Returns:
            Parsed ImageID.

        Raises:
            ValueError: If the text is not a valid identifier.
        """
        if raw.endswith("\n"):
            raw = raw[:-1]
        elems = raw.split("-")
        if len(elems) != 2:
            raise ValueError(f"badly formatted hash string: {raw!r}")
        typ, value = elems
        if not typ:
            raise ValueError("unexpected empty hash")
        if typ != HASH_TYPE:
            raise ValueError(f"unrecognized hash type: {typ}")
        if not value:
            raise ValueError("unexpected empty hash value")
        return cls(type=typ, value=value)

    def __str__(self) -> str:
        return f"{self.type}-{self.value}"
