"""Process exit codes.

Commands translate service failures into one of these codes before exiting.
The values are part of the CLI contract and must stay stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for relpatch commands.

    - 0: Success
    - 1: User error (bad release input, invalid arguments)
    - 2: Environment error (bad config, missing server tree)
    - 5: I/O error (archive or manifest could not be read/written)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    IO_ERROR = 5
