"""Filesystem collaborators: episode scanning, catalog persistence and symlink publishing."""
