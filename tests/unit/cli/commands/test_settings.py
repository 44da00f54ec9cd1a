"""
Unit tests for the 'settings' command group.
"""

import pytest
import yaml
from click.testing import CliRunner

from codeorbit.cli.commands.settings import settings
from codeorbit.config import DEFAULT_NODE_COLORS, SETTINGS_KEY


class TestSettingsCommand:

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def saved(self, isolated_settings):
        """Read back the persisted settings record."""
        def _read():
            return yaml.safe_load((isolated_settings / "settings.yaml").read_text())[SETTINGS_KEY]
        return _read

    def test_show_defaults(self, runner):
        result = runner.invoke(settings, ["show"])

        assert result.exit_code == 0
        assert "Legend: shown" in result.output
        assert "Rotation speed: 0.03" in result.output
        assert DEFAULT_NODE_COLORS["module"] in result.output

    def test_set_color(self, runner, saved):
        result = runner.invoke(settings, ["set-color", "module", "#ABCDEF"])

        assert result.exit_code == 0
        assert saved()["node_colors"]["module"] == "#abcdef"

    def test_set_color_rejects_bad_value(self, runner):
        result = runner.invoke(settings, ["set-color", "module", "blue"])
        assert result.exit_code == 1
        assert "Invalid colour" in result.output

    def test_reset_colors(self, runner, saved):
        runner.invoke(settings, ["set-color", "module", "#123456"])
        runner.invoke(settings, ["reset-colors"])
        assert saved()["node_colors"]["module"] == DEFAULT_NODE_COLORS["module"]

    def test_reset_one_color(self, runner, saved):
        runner.invoke(settings, ["set-color", "module", "#123456"])
        runner.invoke(settings, ["set-color", "form", "#654321"])
        runner.invoke(settings, ["reset-colors", "module"])
        colors = saved()["node_colors"]
        assert colors["module"] == DEFAULT_NODE_COLORS["module"]
        assert colors["form"] == "#654321"

    def test_rotation(self, runner, saved):
        result = runner.invoke(settings, ["rotation", "0.08"])
        assert result.exit_code == 0
        assert saved()["rotation_speed"] == 0.08

    def test_rotation_out_of_range(self, runner):
        assert runner.invoke(settings, ["rotation", "3"]).exit_code == 2

    def test_node_size(self, runner, saved):
        runner.invoke(settings, ["node-size", "1.5"])
        assert saved()["node_size"] == 1.5

    def test_legend_toggle_and_explicit(self, runner, saved):
        result = runner.invoke(settings, ["legend"])
        assert "Legend hidden" in result.output
        assert saved()["show_legend"] is False

        runner.invoke(settings, ["legend", "--on"])
        assert saved()["show_legend"] is True

    def test_corrupt_file_is_not_fatal(self, runner, isolated_settings):
        isolated_settings.mkdir(parents=True)
        (isolated_settings / "settings.yaml").write_text("{{{")
        result = runner.invoke(settings, ["show"])
        assert result.exit_code == 0
        assert "Legend: shown" in result.output
