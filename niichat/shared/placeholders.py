"""Placeholder scanning shared by command validation and substitution.

A placeholder is ``{`` + one or more word characters + ``}``, e.g. ``{who}``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")

# Filled from the chatter's display name, never from command arguments
SENDER = "sender"


def extract_placeholders(text: str, *, exclude: Iterable[str] = (SENDER,)) -> list[str]:
    """Return placeholder names in ``text`` left to right, skipping ``exclude``."""
    excluded = set(exclude)
    return [name for name in PLACEHOLDER_PATTERN.findall(text) if name not in excluded]


def replace_sender(template: str, display_name: str) -> str:
    return template.replace("{" + SENDER + "}", display_name)


def fill_placeholders(template: str, placeholders: list[str], params: str | None) -> str:
    """Substitute ``placeholders`` in ``template`` positionally from ``params``.

    Placeholders without a matching argument are left as-is.
    """
    if params is None:
        return template

    args = params.split()
    for name, value in zip(placeholders, args):
        template = template.replace("{" + name + "}", value)
    return template
