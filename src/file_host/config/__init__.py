"""
Configuration management for the file host.

Contains the Pydantic settings and the DiscordConfig value that the
coordinators receive instead of reading the environment themselves.
"""
