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
Image fetchers that turn a pull reference into a content identifier.
"""

from abc import ABC, abstractmethod
from typing import List

from .image_reference import ImageID, PullReference
from ..RUNNERS.process_runner import ProcessRunner
from ..errors import ExecutionError, FetchError


class ImageFetcher(ABC):
    """
    Resolves pull references to content identifiers.
    """

    @abstractmethod
    def fetch(self, reference: PullReference) -> ImageID:
        """
        Make the image available locally and return its identifier.

        Args:
            reference: What to pull.

        Returns:
            The content identifier of the fetched image.

        Raises:
            FetchError: If the image cannot be fetched.
        """


class RktImageFetcher(ImageFetcher):
    """
    Fetches images into the local rkt store with ``rkt fetch``.
    """

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    def command(self, reference: PullReference) -> List[str]:
        """Build the ``rkt fetch`` argument vector for a reference."""
        args = ["rkt", "fetch", str(reference)]
        if reference.insecure:
            args.append("--insecure-options=image")
        return args

    def fetch(self, reference: PullReference) -> ImageID:
        try:
            result = self.runner.run(self.command(reference), capture=True)
        except ExecutionError as e:
            raise FetchError(f"fetching {reference} failed: {e}") from e

        try:
            return ImageID.parse(result.stdout or "")
        except ValueError as e:
            raise FetchError(f"fetching {reference} returned no usable image ID: {e}") from e
