"""
Unit tests for the 'stats' command.
"""

import pytest
from click.testing import CliRunner

from codeorbit.cli.commands.stats import stats


class TestStatsCommand:

    @pytest.fixture
    def runner(self):
        return CliRunner()

    def test_prints_counts(self, runner, graph_file):
        result = runner.invoke(stats, [str(graph_file)])

        assert result.exit_code == 0
        assert "users: 5 nodes, 4 edges" in result.output
        assert "function" in result.output
        assert "contains" in result.output

    def test_most_frequent_type_first(self, runner, graph_file):
        result = runner.invoke(stats, [str(graph_file)])
        assert result.output.index("function") < result.output.index("route")

    def test_shows_custom_colour(self, runner, graph_file, isolated_settings):
        from codeorbit.store.appearance import AppearanceStore

        with AppearanceStore() as appearance:
            appearance.set_color("route", "#123456")

        result = runner.invoke(stats, [str(graph_file)])
        assert "#123456" in result.output
