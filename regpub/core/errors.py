"""Exit codes for the regpub command line.

These values are used as process exit codes and should remain stable so the
enclosing release pipeline can tell a bad invocation from a failed publish.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad tag/version combination, invalid config)
    - 2: Environment error (npm missing from PATH)
    - 4: Network error (publish, registry query or dist-tag update failed)
    - 5: I/O error (built manifest missing or unreadable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5
