"""
Application package initializer.

Each domain (journal entries, prompts) has a schema module under
``schemas``, a service under ``services`` and a router under
``api/v1/endpoints``.  Shared infrastructure (configuration, database,
security, errors) lives in ``core``.
"""

from .main import app  # noqa: F401
