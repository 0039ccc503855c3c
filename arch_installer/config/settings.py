"""Settings storage for installer defaults."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from arch_installer.exceptions import SettingsError


SETTINGS_PATH = Path(
    os.environ.get(
        "ARCH_INSTALLER_SETTINGS_PATH",
        "/etc/arch-installer/settings.json",
    )
)

# Default values - use these constants instead of hardcoding values elsewhere
DEFAULT_MOUNT_ROOT = "/mnt"
DEFAULT_PING_HOST = "archlinux.org"
DEFAULT_SETTLE_DELAY = 2.0

BASE_PACKAGES = [
    "base",
    "base-devel",
    "linux-zen",
    "linux-zen-headers",
    "linux-firmware",
    "networkmanager",
    "os-prober",
    "ntfs-3g",
    "dosfstools",
    "mtools",
    "nano",
    "sudo",
    "git",
    "curl",
    "wget",
    "pipewire",
    "pipewire-alsa",
    "pipewire-pulse",
    "pipewire-jack",
    "wireplumber",
    "zsh",
]

DESKTOP_PACKAGES = [
    "wayland",
    "xorg-xwayland",
    "hyprland",
    "hyprpaper",
    "waybar",
    "swaync",
    "rofi",
    "thunar",
    "nwg-look",
    "ghostty",
    "polkit-kde-agent",
    "ttf-jetbrains-mono-nerd",
    "pipewire-pulse",
    "wireplumber",
    "pavucontrol",
    "playerctl",
    "brightnessctl",
    "grim",
    "slurp",
    "wl-clipboard",
    "xdg-desktop-portal-hyprland",
    "graphite-gtk-theme",
    "qt5ct",
    "qt6ct",
    "gtk3",
    "gtk4",
]

AUR_PACKAGES = ["visual-studio-code-bin", "goxlr-utility-bin"]

DEFAULT_SETTINGS: dict[str, Any] = {
    "timezone": "Europe/Berlin",
    "locale": "en_US",
    "keymap": "de-latin1",
    "hostname": "archlinux",
    "username": "user",
    "mount_root": DEFAULT_MOUNT_ROOT,
    "ping_host": DEFAULT_PING_HOST,
    "settle_delay": DEFAULT_SETTLE_DELAY,
    "base_packages": BASE_PACKAGES,
    "desktop_packages": DESKTOP_PACKAGES,
    "aur_packages": AUR_PACKAGES,
    "user_groups": ["wheel", "audio", "video", "optical", "storage"],
    "user_shell": "/bin/zsh",
}


@dataclass
class SettingsStore:
    values: dict[str, Any] = field(default_factory=dict)


settings_store = SettingsStore()


def load_settings(path: Path | None = None, required: bool = False) -> None:
    """Reset to the defaults, then overlay the JSON settings file if present.

    With ``required`` (an explicit --config) a missing or unreadable file is
    an error instead of being skipped.

    Raises:
        SettingsError: If ``required`` and the file cannot be used
    """
    settings_store.values = {
        key: list(value) if isinstance(value, list) else value
        for key, value in DEFAULT_SETTINGS.items()
    }
    path = path or SETTINGS_PATH
    if not path.exists():
        if required:
            raise SettingsError(path, "file does not exist")
        return
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        if required:
            raise SettingsError(path, str(error)) from error
        logger.warning(f"Ignoring unreadable settings file {path}: {error}")
        return
    if isinstance(data, dict):
        settings_store.values.update(data)
    elif required:
        raise SettingsError(path, "top-level value must be a JSON object")


def get_setting(key: str, default: Any | None = None) -> Any:
    return settings_store.values.get(key, default)


def get_list(key: str) -> list[str]:
    value = get_setting(key, [])
    if isinstance(value, str):
        return value.split()
    return [str(item) for item in value]


def get_float(key: str, default: float = 0.0) -> float:
    try:
        return float(get_setting(key, default))
    except (TypeError, ValueError):
        return default


load_settings()
