"""
ChatMute - Utilities Package
============================

Duration parsing and time formatting helpers.
"""
