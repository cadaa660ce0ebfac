"""
Notus Backend - Collaborative Note Taking Platform

Document storage, sharing with signed invitations, notifications and
folders (dossiers) behind a JSON API.

Version: 1.0.0
"""

__version__ = "1.0.0"
