"""Exit codes for the epexplorer CLI."""

EXIT_SUCCESS = 0
EXIT_INVALID_USAGE = 3
