"""
NoteVault Backend - personal notes with device-bound sessions and sharing

Notes are owned by one user and can be exposed through a single share
session: a public link, or a private link limited to assigned users.
"""

__version__ = "1.0.0"
