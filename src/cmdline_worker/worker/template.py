"""Command line template compilation."""

from __future__ import annotations

import re
from collections.abc import Mapping

from cmdline_worker.worker.models import RESERVED_PARAMETER_KEYS

_PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]*)\}")


def compile_command_template(template: str, parameters: Mapping[str, str]) -> str:
    """Substitute ``{name}`` placeholders with parameter values.

    Every occurrence of a placeholder is replaced. Placeholders naming a
    reserved key or an unknown parameter are kept as literal text, and unused
    parameters are ignored. Values are inserted in a single pass over the
    template, so a value that itself looks like ``{other}`` is never expanded.
    A placeholder name cannot contain ``{`` or ``}``, so a parameter whose key
    holds a brace is never substituted.
    """

    substitutions = {
        key: value for key, value in parameters.items() if key not in RESERVED_PARAMETER_KEYS
    }
    if not substitutions:
        return template

    def _replace(match: re.Match[str]) -> str:
        return substitutions.get(match.group(1), match.group(0))

    return _PLACEHOLDER_PATTERN.sub(_replace, template)


def template_placeholders(template: str) -> list[str]:
    """Return placeholder names in order of first appearance."""

    seen: dict[str, None] = {}
    for match in _PLACEHOLDER_PATTERN.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)
