"""Arch Linux installer with optional Hyprland desktop provisioning."""

from .__version__ import __version__

__all__ = ["__version__"]
