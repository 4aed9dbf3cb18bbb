"""
CLI layer for descriptor-spine.

Operator tooling on top of the engine: inspect the descriptor catalog,
fingerprint a job directory, and dry-run a bundle selection. All logic lives
in the library packages; this package only parses arguments and renders
output.

Entry point::

    descriptor-spine --help
"""

from descriptor_spine.cli.app import app

__all__ = ["app"]
