"""
ChatMute - Core Package
=======================

Configuration, logging, constants, message templates and storage.
"""
