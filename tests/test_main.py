"""Tests for main.py - orchestration, confirmation gates and exit codes."""

from types import SimpleNamespace

import pytest

from arch_installer import main as main_module
from arch_installer.exceptions import (
    AbortedByUserError,
    CommandFailedError,
    NotRootError,
)

LARGE_DISK = 500107862016
SMALL_DISK = 128 * 1024**3


@pytest.fixture
def installer(mocker, plan):
    """main() with every side-effecting collaborator replaced."""
    mocker.patch("arch_installer.main.setup_logging")
    mocks = SimpleNamespace(
        ui=mocker.patch("arch_installer.main.ui"),
        prompts=mocker.patch("arch_installer.main.prompts"),
        preflight=mocker.patch("arch_installer.main.preflight"),
        validate_disk_path=mocker.patch("arch_installer.main.devices.validate_disk_path"),
        get_disk_size=mocker.patch(
            "arch_installer.main.devices.get_disk_size", return_value=LARGE_DISK
        ),
        list_disks=mocker.patch("arch_installer.main.devices.list_disks", return_value=[]),
        run_pipeline=mocker.patch("arch_installer.main.run_pipeline"),
        unmount_all=mocker.patch("arch_installer.main.mount.unmount_all"),
        run_command=mocker.patch("arch_installer.main.run_checked_command"),
    )
    mocks.prompts.collect_plan.return_value = plan
    mocks.prompts.confirm.return_value = False
    return mocks


class TestMain:
    def test_successful_run_without_reboot(self, installer):
        assert main_module.main([]) == 0

        installer.preflight.run_preflight.assert_called_once_with("archlinux.org")
        installer.run_pipeline.assert_called_once()
        installer.unmount_all.assert_not_called()
        installer.run_command.assert_not_called()

    def test_two_confirmations_before_pipeline(self, installer):
        main_module.main([])

        prompts = [call.args[0] for call in installer.prompts.require_confirmation.call_args_list]
        assert prompts == ["Continue with installation?", "Are you sure you want to continue?"]

    def test_declined_confirmation_touches_nothing(self, installer):
        installer.prompts.require_confirmation.side_effect = AbortedByUserError(
            "Installation aborted"
        )

        assert main_module.main([]) == 1

        installer.run_pipeline.assert_not_called()
        installer.ui.print_error.assert_called_once_with("Installation aborted")

    def test_small_disk_rejected_before_partitioning(self, installer):
        installer.get_disk_size.return_value = SMALL_DISK

        assert main_module.main([]) == 1

        installer.run_pipeline.assert_not_called()
        installer.prompts.require_confirmation.assert_called_once()
        assert "too small" in installer.ui.print_error.call_args.args[0]

    def test_preflight_failure(self, installer):
        installer.preflight.run_preflight.side_effect = NotRootError(1000)

        assert main_module.main([]) == 1

        installer.prompts.collect_plan.assert_not_called()

    def test_step_failure_reported_once(self, installer):
        error = CommandFailedError(["pacstrap"], 1, "failed")
        error.reported = True
        installer.run_pipeline.side_effect = error

        assert main_module.main([]) == 1

        installer.ui.print_error.assert_not_called()
        installer.prompts.confirm.assert_not_called()

    def test_host_os_error_returns_failure(self, installer):
        installer.run_pipeline.side_effect = OSError(28, "No space left on device")

        assert main_module.main([]) == 1

        assert "No space left on device" in installer.ui.print_error.call_args.args[0]
        installer.prompts.confirm.assert_not_called()

    def test_reported_os_error_not_printed_twice(self, installer):
        error = OSError(5, "Input/output error")
        error.reported = True
        installer.run_pipeline.side_effect = error

        assert main_module.main([]) == 1

        installer.ui.print_error.assert_not_called()

    def test_missing_config_file_stops_before_preflight(self, installer, tmp_path):
        assert main_module.main(["--config", str(tmp_path / "missing.json")]) == 1

        installer.preflight.run_preflight.assert_not_called()
        assert "missing.json" in installer.ui.print_error.call_args.args[0]

    def test_reboot(self, installer):
        installer.prompts.confirm.return_value = True

        assert main_module.main(["--mount-root", "/target"]) == 0

        installer.unmount_all.assert_called_once_with("/target")
        installer.run_command.assert_called_once_with(["reboot"])

    def test_interrupt(self, installer):
        installer.prompts.collect_plan.side_effect = KeyboardInterrupt

        assert main_module.main([]) == 130

    def test_extended_plan_adds_desktop_step(self, installer, extended_plan):
        installer.prompts.collect_plan.return_value = extended_plan

        main_module.main([])

        steps = installer.run_pipeline.call_args.args[0]
        assert steps[-1].name == "desktop"


class TestParseArgs:
    def test_defaults(self):
        args = main_module.parse_args([])

        assert args.debug is False
        assert args.trace is False
        assert args.mount_root is None

    def test_flags(self, tmp_path):
        args = main_module.parse_args(["-d", "--trace", "--log-dir", str(tmp_path)])

        assert args.debug is True
        assert args.trace is True
        assert args.log_dir == tmp_path
