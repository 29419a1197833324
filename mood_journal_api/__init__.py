"""
Top-level package for the Mood Journal API.

All functionality lives in submodules under ``app``; import them with
fully qualified names such as ``mood_journal_api.app.main``.
"""

__all__ = []
