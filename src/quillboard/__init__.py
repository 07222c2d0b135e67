"""Quillboard — blog and task API.

Users, posts, tasks, comments, categories and tags behind one REST
surface, with JWT bearer auth and ownership-checked mutations.
"""

__version__ = "0.1.0"
