"""
Placeholder template engine.

Templates mark substitution points with ``{{identifier}}`` where the
identifier is any run of characters other than ``}``.
"""

import re
from typing import Dict, Iterable, List, Mapping

from .models import Parameter

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def placeholder(name: str) -> str:
    """Return the literal token for a parameter name."""
    return "{{" + name + "}}"


def extract_parameters(content: str) -> List[str]:
    """Extract distinct placeholder names from template content.

    Args:
        content: Template text

    Returns:
        Placeholder names in order of first appearance, without duplicates
    """
    # dict keeps insertion order and drops repeats
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(content)))


def render_template(content: str, values: Mapping[str, str]) -> str:
    """Substitute parameter values into template content.

    Keys are applied one at a time in the mapping's order, each replacing
    every literal occurrence of its token. Placeholders without a value are
    left in place.

    Args:
        content: Template text
        values: Parameter name to replacement text

    Returns:
        Rendered text
    """
    rendered = content
    for name, value in values.items():
        rendered = rendered.replace(placeholder(name), value)
    return rendered


def reconcile_parameters(
    content: str,
    previous: Iterable[Parameter] = ()
) -> List[Parameter]:
    """Recompute parameters for content, keeping defaults by name.

    Args:
        content: New template text
        previous: Parameters the prompt had before the change

    Returns:
        One parameter per placeholder in ``content``
    """
    defaults = {param.name: param.default for param in previous}
    return [
        Parameter(name=name, default=defaults.get(name, ""))
        for name in extract_parameters(content)
    ]


def default_values(parameters: Iterable[Parameter]) -> Dict[str, str]:
    """Map parameter names to their defaults in order."""
    return {param.name: param.default for param in parameters}
