"""
SimpleBackup - filesystem backups of hierarchical content repositories.

Exports each configured workspace of a content tree store into serialized
system-view XML files:
- Optional splitting of large trees into one file per top-level child
- Optional GZIP or ZIP compression of every export file
- A restorable manifest and a timestamped run log per backup
"""

__version__ = "0.1.0"
__author__ = "SimpleBackup Contributors"
