"""Test package initialiser.

What:
  Marks ``tests`` as a package so pytest can import modules from nested
  directories (``tests/unit``, ``tests/e2e``) without name clashes.

Invariants & Safety:
  - The file must remain side-effect free.
"""
