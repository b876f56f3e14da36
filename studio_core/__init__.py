"""
Studio Core - persistence and sync layer for the BA BAKE fashion-studio manager.

Build one ``StudioContext`` with ``studio_core.context.build_context`` and use
its repository, gate, backup, sync and preferences components.
"""

__version__ = "1.0.2"
