"""Test suite for the Add-On Releaser.

Test Structure:
- unit/: Unit tests mirroring the ``addon_releaser`` package layout
  - release/: manifest rewriting, ingestion, directives and end-to-end assembly
- conftest.py: Shared fixtures (fake filesystem, pack builders)
"""
