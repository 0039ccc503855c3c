"""Optional Hyprland desktop provisioning for the created user.

Everything here is fixed content; the user name is the only value that
varies. AUR builds need sudo without a TTY, so a NOPASSWD drop-in for the
user exists only while they run.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence

from arch_installer.install.chroot import TargetRoot
from arch_installer.logging import LoggerFactory
from arch_installer.templates import render_template, render_waybar_config

YAY_REPO = "https://aur.archlinux.org/yay.git"
OHMYZSH_INSTALL_URL = "https://raw.github.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
POWERLEVEL10K_REPO = "https://github.com/romkatv/powerlevel10k.git"
ZSH_PLUGIN_REPOS = {
    "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions",
    "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
}
AUDIO_SERVICES = ("pipewire", "wireplumber")

AUR_SUDOERS_RULE = "/etc/sudoers.d/99-installer-aur"
# arch-chroot mounts a fresh tmpfs on /tmp for every call
YAY_BUILD_DIR = "/var/tmp/yay"

log = LoggerFactory.for_packages()


def home_dir(username: str) -> str:
    return f"/home/{username}"


def install_desktop_packages(target: TargetRoot, packages: Sequence[str]) -> None:
    target.run(["pacman", "-Syu", "--noconfirm"], stream=True)
    target.run(["pacman", "-S", "--noconfirm", *packages], stream=True)


@contextmanager
def temporary_nopasswd(target: TargetRoot, username: str) -> Iterator[None]:
    """Grant ``username`` passwordless sudo for the duration of the block."""
    target.write_file(
        AUR_SUDOERS_RULE, render_template("sudoers-aur", username=username), mode=0o440
    )
    try:
        yield
    finally:
        target.remove_file(AUR_SUDOERS_RULE)
        log.debug("Removed temporary sudoers rule")


def install_aur_helper(target: TargetRoot, username: str) -> None:
    """Clone and build yay as ``username``."""
    target.remove_tree(YAY_BUILD_DIR)
    target.run(["git", "clone", YAY_REPO, YAY_BUILD_DIR], user=username)
    target.run(
        ["sh", "-c", f"cd {YAY_BUILD_DIR} && makepkg -si --noconfirm"],
        user=username,
        stream=True,
    )
    target.remove_tree(YAY_BUILD_DIR)


def install_aur_packages(target: TargetRoot, username: str, packages: Sequence[str]) -> None:
    if not packages:
        return
    target.run(["yay", "-S", "--noconfirm", *packages], user=username, stream=True)


def install_shell_framework(target: TargetRoot, username: str) -> None:
    """Oh My Zsh, the powerlevel10k theme and two plugins, plus .zshrc."""
    home = home_dir(username)
    target.run(
        ["sh", "-c", render_template("ohmyzsh-install.sh", url=OHMYZSH_INSTALL_URL)],
        user=username,
    )
    custom = f"{home}/.oh-my-zsh/custom"
    target.run(
        ["git", "clone", "--depth=1", POWERLEVEL10K_REPO, f"{custom}/themes/powerlevel10k"],
        user=username,
    )
    for name, repo in ZSH_PLUGIN_REPOS.items():
        target.run(["git", "clone", repo, f"{custom}/plugins/{name}"], user=username)
    target.write_file(f"{home}/.zshrc", render_template("zshrc"), owner=username)


def write_desktop_configs(target: TargetRoot, username: str) -> None:
    home = home_dir(username)
    target.make_dirs(f"{home}/.config/hypr", owner=username)
    target.write_file(
        f"{home}/.config/hypr/hyprland.conf", render_template("hyprland.conf"), owner=username
    )
    target.make_dirs(f"{home}/.config/waybar", owner=username)
    target.write_file(
        f"{home}/.config/waybar/config", render_waybar_config(), owner=username
    )
    target.chown(f"{home}/.config", username, recursive=True)


def enable_audio_services(target: TargetRoot) -> None:
    for service in AUDIO_SERVICES:
        target.enable_service(service, user_scope=True)


def setup_extended_system(
    target: TargetRoot,
    username: str,
    packages: Sequence[str],
    aur_packages: Sequence[str],
) -> None:
    install_desktop_packages(target, packages)
    with temporary_nopasswd(target, username):
        install_aur_helper(target, username)
        install_aur_packages(target, username, aur_packages)
    install_shell_framework(target, username)
    write_desktop_configs(target, username)
    enable_audio_services(target)
    log.success("Extended setup completed")
