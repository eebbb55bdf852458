"""Report a long-running operation as one named action.

The action prints a header when it starts and a single OK / error line when
it ends, whatever detail the work itself prints in between.
"""

from __future__ import annotations

from collections.abc import Callable

from regpub.core.result import Err, Result
from regpub.output.console import ConsoleProtocol

__all__ = ["run_action"]


def run_action[T, E](
    console: ConsoleProtocol,
    label: str,
    work: Callable[[], Result[T, E]],
) -> Result[T, E]:
    """Run ``work`` as the action ``label`` and return its result unchanged.

    An exception escaping ``work`` is reported as a failure and re-raised.
    """
    console.header(label)
    try:
        with console.status(label):
            result = work()
    except Exception:
        console.error(label)
        raise

    if isinstance(result, Err):
        console.error(label)
    else:
        console.success(label)
    return result
