"""Tests for templates - placeholder substitution and escaping."""

import json

import pytest

from arch_installer.exceptions import TemplateValueError, TemplateVariableError
from arch_installer import templates


class TestSubstitute:
    def test_every_placeholder_replaced_and_nothing_else_changed(self):
        text = "a {{ x }} b {{y}} c {{ x }} $HOME %wheel {single}\n"

        result = templates.substitute("t", text, "conf", {"x": "1", "y": "2"})

        assert result == "a 1 b 2 c 1 $HOME %wheel {single}\n"

    def test_value_looking_like_placeholder_written_literally(self):
        result = templates.substitute("t", "{{ a }}-{{ b }}", "conf", {"a": "{{ b }}", "b": "B"})

        assert result == "{{ b }}-B"

    def test_special_characters_kept_verbatim_in_conf(self):
        result = templates.substitute("t", "KEYMAP={{ k }}", "conf", {"k": "de|&$/\\1"})

        assert result == "KEYMAP=de|&$/\\1"

    def test_undeclared_placeholder_in_text_rejected(self):
        with pytest.raises(TemplateVariableError) as exc_info:
            templates.substitute("t", "{{ a }} {{ b }}", "conf", {"a": "1"})

        assert exc_info.value.missing == ["b"]

    @pytest.mark.parametrize("value", ["two\nlines", "cr\r", "nul\0"])
    def test_conf_rejects_line_breaking_values(self, value):
        with pytest.raises(TemplateValueError):
            templates.substitute("t", "{{ v }}", "conf", {"v": value})

    def test_shell_values_are_quoted(self):
        result = templates.substitute("t", "echo {{ v }}", "shell", {"v": "a'b; rm -rf /"})

        assert result == "echo 'a'\"'\"'b; rm -rf /'"


class TestRenderTemplate:
    def test_hosts_maps_loopback_alias_to_hostname(self):
        hosts = templates.render_template("hosts", hostname="box")

        assert "127.0.0.1   localhost" in hosts
        assert "::1         localhost" in hosts
        assert "127.0.1.1   box.localdomain box" in hosts
        assert "{{" not in hosts

    def test_locale_files(self):
        assert templates.render_template("locale.gen", locale="en_US") == "en_US.UTF-8 UTF-8\n"
        assert templates.render_template("locale.conf", locale="en_US") == "LANG=en_US.UTF-8\n"

    def test_vconsole(self):
        assert templates.render_template("vconsole.conf", keymap="us") == "KEYMAP=us\n"

    def test_boot_entry_uses_root_uuid(self):
        entry = templates.render_template("arch.conf", root_uuid="abcd-ef")

        assert "options root=UUID=abcd-ef rw" in entry
        assert "linux   /vmlinuz-linux-zen" in entry

    def test_loader_conf_is_static(self):
        loader = templates.render_template("loader.conf")

        assert loader.splitlines() == [
            "default arch",
            "timeout 3",
            "console-mode max",
            "editor  no",
        ]

    def test_chpasswd_line(self):
        assert templates.render_template("chpasswd", account="root", password="p w") == "root:p w\n"

    def test_password_with_newline_rejected(self):
        with pytest.raises(TemplateValueError):
            templates.render_template("chpasswd", account="root", password="a\nbob:x")

    def test_missing_variable_rejected(self):
        with pytest.raises(TemplateVariableError) as exc_info:
            templates.render_template("hosts")

        assert exc_info.value.missing == ["hostname"]

    def test_unexpected_variable_rejected(self):
        with pytest.raises(TemplateVariableError) as exc_info:
            templates.render_template("loader.conf", timeout="5")

        assert exc_info.value.unexpected == ["timeout"]

    def test_static_hyprland_config_keeps_dollar_variables(self):
        config = templates.render_template("hyprland.conf")

        assert "$mainMod = SUPER" in config
        assert "exec-once = waybar" in config

    def test_ohmyzsh_url_quoted(self):
        script = templates.render_template("ohmyzsh-install.sh", url="https://example.org/install.sh")

        assert "curl -fsSL https://example.org/install.sh" in script
        assert "--unattended" in script

    def test_every_template_file_exists(self):
        for spec in templates.TEMPLATES.values():
            assert (templates.TEMPLATES_DIR / spec.filename).is_file()


class TestWaybarConfig:
    def test_renders_valid_json(self):
        data = json.loads(templates.render_waybar_config())

        assert data["layer"] == "top"
        assert data["modules-center"] == ["clock"]
        assert data["hyprland/workspaces"]["format-icons"]["10"] == "10"
        assert data["clock"]["format"] == "{:%Y-%m-%d %H:%M:%S}"

    def test_non_ascii_kept(self):
        assert "Disconnected ⚠" in templates.render_waybar_config()
