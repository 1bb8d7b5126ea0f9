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
Parser for YAML pod templates.
"""
import os
import yaml
from typing import Dict, Optional, Sequence
from dotenv import dotenv_values
from pydantic import ValidationError

from ..MODELS.pod_manifest import PodManifest
from ..UTILS.string_interpolation import TemplateInterpolator
from ..errors import TemplateError


class TemplateParser:
    """
    Parser for pod-template.yaml files.
    """
    def __init__(self,
                 context: Optional[Dict[str, str]] = None,
                 env_files: Sequence[str] = (),
                 interpolate: bool = False):
        """
        Initializes the parser with the interpolation context.

        Template text is passed through unchanged unless ``interpolate`` is set
        or ``.env`` files are given.

        :param context: Variables for interpolation, defaults to the process environment.
        :param env_files: ``.env`` files layered over the context, later files win.
        :param interpolate: Substitute variable references before parsing.
        """
        self.interpolate = interpolate or bool(env_files)
        merged = dict(os.environ) if context is None else dict(context)
        for env_file in env_files:
            if not os.path.isfile(env_file):
                raise TemplateError(f"env file {env_file} not found")
            merged.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        self.interpolator = TemplateInterpolator(merged)

    def parse(self, template_path: str) -> PodManifest:
        """
        Parses a template file into a pod manifest.

        :param template_path: Path to the template.
        :return: The parsed manifest.
        :raises TemplateError: If the file is missing or malformed.
        """
        try:
            with open(template_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise TemplateError(f"cannot read template {template_path}: {e.strerror or e}") from e
        return self.parse_from_string(content, source=template_path)

    def parse_from_string(self, content: str, source: str = "<string>") -> PodManifest:
        """
        Parses template text into a pod manifest.

        :param content: YAML content of the template.
        :param source: Name used in error messages.
        :return: The parsed manifest.
        """
        if self.interpolate:
            try:
                content = self.interpolator.interpolate(content)
            except KeyError as e:
                raise TemplateError(f"{source}: variable {e.args[0]} is not set") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise TemplateError(f"{source}: invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise TemplateError(f"{source}: expected a mapping at the top level")

        try:
            return PodManifest.model_validate(data)
        except ValidationError as e:
            raise TemplateError(f"{source}: not a valid pod template:\n{e}") from e
