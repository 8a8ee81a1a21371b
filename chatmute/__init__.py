"""
ChatMute
========

Timed chat mutes for a shared Discord channel, with persistence across
restarts and moderator commands to apply, remove and list mutes.
"""
