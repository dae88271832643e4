"""Test fixtures for TrialForge unit and integration tests.

Fixtures:
    - session_config.yml: Two-block session (pure movement + PRP) used by
      the YAML and CLI tests
"""
