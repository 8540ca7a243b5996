"""Discriminated result type returned by every core operation.

    result = authenticate(repo, tokens, email, password)
    if isinstance(result, Err):
        ...  # result.kind tells the caller what went wrong
    session = result.value
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from domain.model.errors import ErrorKind

T = TypeVar('T')


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying an error kind and a human-readable message."""
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
