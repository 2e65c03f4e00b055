"""epexplorer - IntelliJ Platform extension-point explorer for AI agents."""

__version__ = "0.1.0"
