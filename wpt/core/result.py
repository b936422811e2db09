"""Result type for explicit error handling.

Every fallible step of a release returns a Result instead of raising, so
the pipeline driver can stop at the first failure and still run its
finalizer.

Usage:
    def read_slug(table: dict[str, str]) -> Result[str, str]:
        slug = table.get("slug")
        if not slug:
            return Err("missing slug")
        return Ok(slug)

    match read_slug({"slug": "akismet"}):
        case Ok(slug):
            print(f"Slug: {slug}")
        case Err(error):
            print(f"Error: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Represents a successful result containing a value.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Represents a failed result containing an error.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
