"""
Utilities for interpolating environment variables into pod templates.
"""
import re
from typing import Dict, Mapping

# ${VAR}, ${VAR:-default}, ${VAR:+value} and $$ for a literal dollar sign.
_PATTERN = re.compile(r'\$\$|\$\{([A-Za-z_][A-Za-z0-9_]*)(?::(-|\+)([^}]*))?\}')


class TemplateInterpolator:
    """
    Substitutes shell-style variable references in template text.
    """
    def __init__(self, context: Mapping[str, str]):
        """
        :param context: Variables available to the template.
        """
        self.context: Dict[str, str] = dict(context)

    def interpolate(self, template: str) -> str:
        """
        Interpolates every variable reference in ``template``.

        :param template: Raw template text.
        :return: The text with all references replaced.
        :raises KeyError: If a plain ``${VAR}`` reference is unset.
        """
        def replace(match):
            if match.group(0) == '$$':
                return '$'
            name, modifier, alternative = match.group(1), match.group(2), match.group(3)
            value = self.context.get(name)
            if modifier == '-':
                return value if value else alternative
            if modifier == '+':
                return alternative if value else ''
            if value is None:
                raise KeyError(name)
            return value

        return _PATTERN.sub(replace, template)
