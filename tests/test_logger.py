"""
Tests for chatmute/core/logger.py

Covers which levels reach the main log and the error log.
"""

import pytest

from chatmute.core.logger import TreeLogger


@pytest.fixture
def tree_logger(tmp_path):
    return TreeLogger(logs_dir=tmp_path)


def read(path):
    return path.read_text(encoding="utf-8") if path.exists() else ""


class TestLogLevels:
    """Tests for log level routing."""

    def test_success_written_to_main_log_only(self, tree_logger):
        tree_logger.success("Cog Loaded: mute")

        assert "✅ Cog Loaded: mute" in read(tree_logger.log_file)
        assert "Cog Loaded" not in read(tree_logger.error_file)

    def test_critical_written_to_both_logs(self, tree_logger):
        tree_logger.critical("Invalid configuration: missing GUILD_ID")

        assert "🚨 Invalid configuration" in read(tree_logger.log_file)
        assert "🚨 Invalid configuration" in read(tree_logger.error_file)

    def test_tree_items(self, tree_logger):
        tree_logger.tree("PLAYER MUTED", [("Player", "Bob"), ("Duration", "45 minute(s)")], emoji="🔇")

        text = read(tree_logger.log_file)
        assert "🔇 PLAYER MUTED" in text
        assert "├─ Player: Bob" in text
        assert "└─ Duration: 45 minute(s)" in text

    def test_error_without_loop_skips_webhook(self, tree_logger):
        tree_logger.set_webhook("https://discord.com/api/webhooks/1/x")

        tree_logger.error("Mute Data Save Failed", [("Error", "disk full")])

        assert "Mute Data Save Failed" in read(tree_logger.error_file)
