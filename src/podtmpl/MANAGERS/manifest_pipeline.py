"""
Preparation of a runnable pod manifest from a template.
"""
from typing import Optional

import click

from ..MODELS.pod_manifest import PodManifest
from ..PARSERS.template_parser import TemplateParser
from ..REGISTRY.image_fetcher import ImageFetcher
from ..REGISTRY.image_reference import PullReference
from .volume_manager import VolumeManager

DEFAULT_ID = "0"


class ManifestPipeline:
    """
    Loads a template and turns it into a manifest rkt accepts.

    The steps run strictly in order: load, resolve images, normalize
    volume paths, inject defaults.
    """
    def __init__(self, fetcher: ImageFetcher, parser: Optional[TemplateParser] = None):
        """
        :param fetcher: Resolves images that have no ID in the template.
        :param parser: Template parser, defaults to one over the process environment.
        """
        self.fetcher = fetcher
        self.parser = parser or TemplateParser()

    def prepare(self, template_path: str, base_path: str) -> PodManifest:
        """
        Runs the whole pipeline.

        :param template_path: Path to the pod template.
        :param base_path: Directory relative volume sources are resolved against.
        :return: Manifest with image IDs, absolute sources and user/group set.
        """
        manifest = self.parser.parse(template_path)
        self.resolve_images(manifest)
        VolumeManager(base_path).normalize(manifest.volumes)
        self.inject_defaults(manifest)
        return manifest

    def resolve_images(self, manifest: PodManifest) -> None:
        """
        Fetches every image lacking an ID and records the fetched ID.

        :param manifest: Manifest updated in place.
        :raises FetchError: If any fetch fails.
        """
        for runtime_app in manifest.apps:
            if runtime_app.image.id:
                continue
            reference = PullReference.from_image(runtime_app.image)
            click.echo(f"{runtime_app.name}: No Image ID specified, fetching {reference}...", err=True)
            runtime_app.image.id = str(self.fetcher.fetch(reference))

    @staticmethod
    def inject_defaults(manifest: PodManifest) -> None:
        """
        Runs apps without an explicit user or group as root.

        :param manifest: Manifest updated in place.
        """
        for runtime_app in manifest.apps:
            if not runtime_app.app.user:
                runtime_app.app.user = DEFAULT_ID
            if not runtime_app.app.group:
                runtime_app.app.group = DEFAULT_ID
