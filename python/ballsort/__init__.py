"""Ball-sort puzzle engine: generation, play, undo/redo and hints."""

__version__ = "0.1.0"
