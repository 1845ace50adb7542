"""
Exit codes for kit.

Semantic exit codes so scripts wrapping kit can tell failures apart.
"""

# Success (including a normal quit from an interactive command)
SUCCESS = 0

# General error (unspecified, terminal or input failures)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

