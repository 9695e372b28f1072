"""
Module: lobster.__init__

What:
  Aggregate package exports for Lobster's change-detection toolkit and expose
  the primary namespace segments (configuration, snapshot state, workflows,
  and utilities).

Why:
  Workflows and scripts import the snapshot store and workflow helpers through
  these names; keeping the list explicit stops private helpers from becoming
  accidental API.

Interfaces:
  - config: Runtime configuration loader and schema.
  - state: Key normalisation, canonical encoding, and the snapshot store.
  - workflows: Pull-request monitor and email triage.
  - utils: Structured logging and the external process capability.
"""

__version__ = "0.1.0"

__all__ = [
    "config",
    "state",
    "workflows",
    "utils",
]
