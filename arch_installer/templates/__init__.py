"""Configuration file templates written into the installed system.

Templates live next to this module in ``files/`` and use ``{{ name }}``
placeholders. Each template declares the exact set of variables it takes
and the format its values are escaped for:

    conf   plain text / key=value files; values must be single-line
    shell  POSIX shell snippets; values are quoted with shlex.quote

Substitution is a single pass, so a value that itself looks like a
placeholder is written literally.

Example:
    >>> render_template("hostname", hostname="archlinux")
    'archlinux\\n'
"""

from __future__ import annotations

import json
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from arch_installer.exceptions import (
    TemplateValueError,
    TemplateVariableError,
)

TEMPLATES_DIR = Path(__file__).resolve().parent / "files"

PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

_FORBIDDEN_CONF_CHARS = ("\n", "\r", "\0")


@dataclass(frozen=True)
class TemplateSpec:
    filename: str
    format: str
    variables: frozenset[str] = frozenset()


TEMPLATES: dict[str, TemplateSpec] = {
    "hostname": TemplateSpec("hostname", "conf", frozenset({"hostname"})),
    "hosts": TemplateSpec("hosts", "conf", frozenset({"hostname"})),
    "locale.gen": TemplateSpec("locale.gen", "conf", frozenset({"locale"})),
    "locale.conf": TemplateSpec("locale.conf", "conf", frozenset({"locale"})),
    "vconsole.conf": TemplateSpec("vconsole.conf", "conf", frozenset({"keymap"})),
    "chpasswd": TemplateSpec("chpasswd", "conf", frozenset({"account", "password"})),
    "arch.conf": TemplateSpec("arch.conf", "conf", frozenset({"root_uuid"})),
    "loader.conf": TemplateSpec("loader.conf", "conf"),
    "sudoers-aur": TemplateSpec("sudoers-aur", "conf", frozenset({"username"})),
    "ohmyzsh-install.sh": TemplateSpec("ohmyzsh-install.sh", "shell", frozenset({"url"})),
    "zshrc": TemplateSpec("zshrc", "conf"),
    "hyprland.conf": TemplateSpec("hyprland.conf", "conf"),
}


def _escape(template: str, fmt: str, name: str, value: Any) -> str:
    text = str(value)
    if fmt == "shell":
        return shlex.quote(text)
    for char in _FORBIDDEN_CONF_CHARS:
        if char in text:
            raise TemplateValueError(template, name, f"contains {char!r}")
    return text


def load_template(name: str) -> str:
    try:
        spec = TEMPLATES[name]
    except KeyError:
        raise TemplateVariableError(name, missing=["<unknown template>"]) from None
    return (TEMPLATES_DIR / spec.filename).read_text(encoding="utf-8")


def substitute(template: str, text: str, fmt: str, values: dict[str, Any]) -> str:
    """Replace every ``{{ name }}`` in ``text`` with its escaped value.

    Raises:
        TemplateVariableError: If ``text`` uses a name not in ``values``
        TemplateValueError: If a value cannot be escaped for ``fmt``
    """
    used = set(PLACEHOLDER_RE.findall(text))
    missing = used - set(values)
    if missing:
        raise TemplateVariableError(template, missing=missing)
    escaped = {key: _escape(template, fmt, key, value) for key, value in values.items()}
    return PLACEHOLDER_RE.sub(lambda match: escaped[match.group(1)], text)


def render_template(name: str, **values: Any) -> str:
    """Render the named template with exactly its declared variables."""
    text = load_template(name)
    spec = TEMPLATES[name]
    supplied = set(values)
    if supplied != spec.variables:
        raise TemplateVariableError(
            name,
            missing=spec.variables - supplied,
            unexpected=supplied - spec.variables,
        )
    return substitute(name, text, spec.format, values)


# Waybar reads JSON; it is built as data and serialized rather than templated.
WAYBAR_CONFIG: dict[str, Any] = {
    "layer": "top",
    "height": 30,
    "spacing": 4,
    "modules-left": ["hyprland/workspaces", "hyprland/window"],
    "modules-center": ["clock"],
    "modules-right": ["pulseaudio", "network", "battery", "tray"],
    "hyprland/workspaces": {
        "disable-scroll": True,
        "all-outputs": True,
        "format": "{icon}",
        "format-icons": {str(number): str(number) for number in range(1, 11)},
    },
    "clock": {
        "format": "{:%Y-%m-%d %H:%M:%S}",
        "interval": 1,
    },
    "pulseaudio": {
        "format": "{volume}% {icon}",
        "format-bluetooth": "{volume}% {icon}",
        "format-muted": "婢",
        "format-icons": {
            "headphone": "",
            "hands-free": "",
            "headset": "",
            "phone": "",
            "portable": "",
            "car": "",
            "default": ["", "", ""],
        },
        "on-click": "pavucontrol",
    },
    "network": {
        "format-wifi": "{essid} ({signalStrength}%) ",
        "format-ethernet": "{ifname} ",
        "format-disconnected": "Disconnected ⚠",
    },
}


def render_waybar_config(config: dict[str, Any] | None = None) -> str:
    return json.dumps(config or WAYBAR_CONFIG, indent=4, ensure_ascii=False) + "\n"


__all__ = [
    "TEMPLATES",
    "TemplateSpec",
    "WAYBAR_CONFIG",
    "load_template",
    "render_template",
    "render_waybar_config",
    "substitute",
]
