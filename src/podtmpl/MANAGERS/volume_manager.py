"""
Volume source resolution for pod manifests.
"""
import os
from typing import List

from ..MODELS.pod_manifest import Volume
from ..errors import PathResolutionError


class VolumeManager:
    """
    Rewrites relative volume sources to absolute host paths.
    """
    def __init__(self, base_dir: str = "."):
        """
        Initializes the volume manager.

        :param base_dir: The base directory relative sources are joined to.
        """
        self.base_dir = base_dir

    def resolve_source(self, source: str) -> str:
        """
        Resolves the source path of a volume.

        :param source: The source path as written in the template.
        :return: The absolute path to the source.
        :raises PathResolutionError: If the path cannot be resolved.
        """
        if os.path.isabs(source):
            return source
        try:
            return os.path.abspath(os.path.join(self.base_dir, source))
        except (OSError, ValueError) as e:
            raise PathResolutionError(f"cannot resolve volume source {source!r} against {self.base_dir!r}: {e}") from e

    def normalize(self, volumes: List[Volume]) -> None:
        """
        Makes every volume source absolute, in place.

        :param volumes: Volumes of a pod manifest.
        """
        for volume in volumes:
            # `empty` volumes carry no host source
            if volume.source:
                volume.source = self.resolve_source(volume.source)
