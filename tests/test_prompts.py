"""Tests for ui/prompts.py - interactive plan collection."""

from unittest.mock import patch

import pytest

from arch_installer.exceptions import AbortedByUserError
from arch_installer.ui import prompts


@pytest.fixture
def console_input():
    with patch("arch_installer.ui.prompts.console.input") as mock_input:
        yield mock_input


class TestPromptInput:
    def test_empty_input_returns_default(self, console_input):
        console_input.return_value = ""

        assert prompts.prompt_input("Enter timezone", "Europe/Berlin") == "Europe/Berlin"

    def test_non_empty_input_returned_verbatim(self, console_input):
        console_input.return_value = " America/New_York "

        assert prompts.prompt_input("Enter timezone", "Europe/Berlin") == " America/New_York "

    def test_default_shown_in_prompt(self, console_input):
        console_input.return_value = ""

        prompts.prompt_input("Enter hostname", "archlinux")

        assert console_input.call_args[0][0] == "Enter hostname [archlinux]: "

    def test_no_default_returns_empty_string(self, console_input):
        console_input.return_value = ""

        assert prompts.prompt_input("Enter the disk") == ""


class TestPromptPassword:
    def test_matching_pair_returns_once(self, console_input):
        console_input.side_effect = ["secret", "secret"]

        assert prompts.prompt_password("Enter root password") == "secret"
        assert console_input.call_count == 2

    def test_mismatch_reprompts_until_match(self, console_input):
        console_input.side_effect = ["one", "two", "three", "four", "five", "five"]

        with patch("arch_installer.ui.prompts.print_error") as mock_error:
            result = prompts.prompt_password("Enter user password")

        assert result == "five"
        assert console_input.call_count == 6
        assert mock_error.call_count == 2

    def test_entries_are_masked(self, console_input):
        console_input.side_effect = ["pw", "pw"]

        prompts.prompt_password("Enter root password")

        for call in console_input.call_args_list:
            assert call.kwargs["password"] is True


class TestConfirm:
    @pytest.mark.parametrize("answer", ["no", "y", "Yes", "YES", "yes ", "", "sure"])
    def test_only_exact_yes_is_affirmative(self, console_input, answer):
        console_input.return_value = answer

        assert prompts.confirm("Continue?") is False

    def test_yes_is_affirmative(self, console_input):
        console_input.return_value = "yes"

        assert prompts.confirm("Continue?") is True

    def test_require_confirmation_raises_on_decline(self, console_input):
        console_input.return_value = "no"

        with pytest.raises(AbortedByUserError, match="Installation aborted"):
            prompts.require_confirmation("Continue?", "Installation aborted")

    def test_require_confirmation_passes_on_yes(self, console_input):
        console_input.return_value = "yes"

        prompts.require_confirmation("Continue?")


class TestCollectPlan:
    def test_defaults_and_answers_flow_into_plan(self, console_input):
        console_input.side_effect = [
            "/dev/nvme0n1",  # disk
            "",  # timezone -> default
            "de_DE",  # locale
            "",  # keymap -> default
            "",  # hostname -> default
            "bob",  # username
            "rootpw",
            "rootpw",
            "userpw",
            "userpw",
            "yes",  # extended
        ]

        plan = prompts.collect_plan()

        assert plan.disk == "/dev/nvme0n1"
        assert plan.timezone == "Europe/Berlin"
        assert plan.locale == "de_DE"
        assert plan.keymap == "de-latin1"
        assert plan.hostname == "archlinux"
        assert plan.username == "bob"
        assert plan.root_password == "rootpw"
        assert plan.user_password == "userpw"
        assert plan.extended is True

    def test_extended_declined(self, console_input):
        console_input.side_effect = ["/dev/sda", "", "", "", "", "", "a", "a", "b", "b", "no"]

        plan = prompts.collect_plan()

        assert plan.extended is False
        assert plan.username == "user"
