import argparse
import tempfile
from pathlib import Path

from arch_installer.config.settings import get_setting, load_settings
from arch_installer.exceptions import AbortedByUserError, InstallerError, SettingsError
from arch_installer.install import preflight
from arch_installer.logging import LoggerFactory, setup_logging
from arch_installer.pipeline import InstallContext, build_install_steps, run_pipeline
from arch_installer.storage import devices, layout, mount
from arch_installer.system.commands import run_checked_command
from arch_installer.ui import console as ui
from arch_installer.ui import prompts


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Install Arch Linux onto a disk, optionally with a Hyprland desktop"
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable verbose debug output")
    parser.add_argument("--trace", action="store_true", help="Log raw output of every tool")
    parser.add_argument("--log-dir", type=Path, help="Directory for install logs")
    parser.add_argument("--config", type=Path, help="JSON settings file overriding defaults")
    parser.add_argument("--mount-root", help="Where the target is assembled (default /mnt)")
    return parser.parse_args(argv)


def _setup_logging(args) -> None:
    try:
        setup_logging(debug=args.debug, trace=args.trace, log_dir=args.log_dir)
    except OSError:
        # Not root yet or read-only /var/log; the root check reports the former.
        setup_logging(
            debug=args.debug,
            trace=args.trace,
            log_dir=Path(tempfile.gettempdir()) / "arch-installer",
        )


def confirm_target(plan) -> None:
    """Refuse unusable or undersized disks, then ask before destroying data."""
    devices.validate_disk_path(plan.disk)
    layout.validate_disk_capacity(plan.disk, devices.get_disk_size(plan.disk))
    ui.print_warning(f"This will DESTROY ALL DATA on {plan.disk}!")
    prompts.require_confirmation("Are you sure you want to continue?")


def print_completion(extended: bool) -> None:
    ui.print_blank()
    ui.print_success("=========================================")
    ui.print_success("    Installation completed successfully!")
    ui.print_success("=========================================")
    ui.print_blank()
    ui.print_status("You can now reboot into your new Arch Linux system.")
    if extended:
        ui.print_status("Hyprland is installed. Start it with 'Hyprland' after login.")
        ui.print_status("Configure powerlevel10k with 'p10k configure'")
    ui.print_status("Don't forget to remove the installation media.")
    ui.print_blank()


def run_installer(mount_root=None) -> int:
    log = LoggerFactory.for_system()
    mount_root = mount_root or get_setting("mount_root", "/mnt")

    ui.print_banner()
    preflight.run_preflight(get_setting("ping_host"))

    ui.print_disks(devices.list_disks())
    ui.print_blank()
    plan = prompts.collect_plan()
    log.info("Installation plan collected", plan=repr(plan))

    ui.print_blank()
    ui.print_status("Starting installation with the following settings:")
    ui.print_lines(plan.summary_lines())
    ui.print_blank()
    prompts.require_confirmation("Continue with installation?", "Installation aborted")

    confirm_target(plan)

    context = InstallContext.from_settings(plan, mount_root)
    run_pipeline(build_install_steps(plan.extended), context)

    print_completion(plan.extended)
    if prompts.confirm("Reboot now?"):
        mount.unmount_all(context.mount_root)
        log.info("Rebooting")
        run_checked_command(["reboot"])
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.config is not None:
        try:
            load_settings(args.config, required=True)
        except SettingsError as error:
            ui.print_error(str(error))
            return 1
    _setup_logging(args)
    log = LoggerFactory.for_system()

    try:
        return run_installer(args.mount_root)
    except AbortedByUserError as error:
        ui.print_error(str(error))
        log.warning(f"Aborted: {error}")
        return 1
    except (InstallerError, OSError) as error:
        # Step failures were already reported by run_pipeline
        if not getattr(error, "reported", False):
            ui.print_error(str(error))
        log.error(f"Installation failed: {error}")
        return 1
    except KeyboardInterrupt:
        ui.print_blank()
        ui.print_error("Interrupted")
        log.warning("Interrupted by operator")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
