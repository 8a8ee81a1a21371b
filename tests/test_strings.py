"""
Tests for chatmute/core/strings.py
"""

from chatmute.core.strings import get_string


class TestGetString:
    """Tests for get_string."""

    def test_format(self):
        assert get_string("unmute.success", player="Bob") == "🔊 Unmuted **Bob**."

    def test_no_arguments(self):
        assert get_string("mutelist.empty") == "Nobody is muted."

    def test_unknown_key_returns_key(self):
        assert get_string("no.such.key") == "no.such.key"

    def test_missing_argument_returns_template(self):
        assert get_string("unmute.success", name="Bob") == "🔊 Unmuted **{player}**."
