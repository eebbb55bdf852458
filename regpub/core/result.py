"""Result type for explicit error handling.

Services return ``Ok`` or ``Err`` instead of raising for expected failures,
so callers decide how a failed npm command or a bad manifest is reported.

Usage:
    match read_manifest_version(cwd, "react"):
        case Ok(version):
            console.print(version)
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
