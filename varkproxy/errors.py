"""Error types shared by the proxy, the DNS helper and the commands."""

from __future__ import annotations

import enum
import json
import sys
from dataclasses import dataclass
from typing import IO, Iterable, Iterator


def _describe(error: BaseException) -> str:
    """Render an error the way it appears inside a chained message."""
    if isinstance(error, NetavarkError):
        return str(error)
    if isinstance(error, json.JSONDecodeError):
        return f"JSON Decoding error: {error}"
    if isinstance(error, OSError):
        return f"IO error: {error}"
    return str(error)


class NetavarkError(Exception):
    """Base error; carries a message and the exit code the program should use."""

    exit_code: int = 1

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def print_json(self, file: IO[str] | None = None) -> None:
        """Write the error as a one-line JSON object understood by callers."""
        out = file if file is not None else sys.stdout
        try:
            text = json.dumps(
                {"error": str(self)}, separators=(",", ":"), ensure_ascii=False
            )
        except (TypeError, ValueError):
            text = f"Failed to serialize error message: {self}"
        print(text, file=out)

    def root(self) -> BaseException:
        """Follow chained errors down to the innermost one."""
        return self


class ExitCodeError(NetavarkError):
    """An error that asks for a specific process exit code."""

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.exit_code = code


class ChainedError(NetavarkError):
    """An error that adds context to another error."""

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(f"{message}: {_describe(cause)}")
        self.context_message = message
        self.cause = cause
        self.__cause__ = cause

    def root(self) -> BaseException:
        if isinstance(self.cause, NetavarkError):
            return self.cause.root()
        return self.cause


class MultipleErrors(NetavarkError):
    """Several errors collected while cleaning up as much as possible."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: tuple[BaseException, ...] = tuple(errors)
        if len(self.errors) == 1:
            message = _describe(self.errors[0])
        else:
            message = "netavark encountered multiple errors:" + "".join(
                f"\n\t- {_describe(e)}" for e in self.errors
            )
        super().__init__(message)


class NetavarkErrorList:
    """Accumulates errors; nested lists are flattened on push."""

    def __init__(self) -> None:
        self._errors: list[BaseException] = []

    def push(self, err: BaseException) -> None:
        if isinstance(err, MultipleErrors):
            self._errors.extend(err.errors)
        else:
            self._errors.append(err)

    def raise_if_any(self) -> None:
        """Raise a MultipleErrors holding every collected error, if there are any."""
        if self._errors:
            raise MultipleErrors(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self._errors)


class Code(enum.IntEnum):
    """gRPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


@dataclass(frozen=True)
class Status:
    """A gRPC status: a code and a message."""

    code: Code
    message: str = ""

    def __str__(self) -> str:
        return f'status: {self.code.name}, message: "{self.message}"'


class DhcpProxyError(NetavarkError):
    """An error reported by the DHCP proxy as a gRPC status."""

    def __init__(self, status: Status) -> None:
        super().__init__(f"dhcp proxy error: {status}")
        self.status = status


def wrap(msg: str, error: BaseException) -> ChainedError:
    """Return a new error that prefixes ``error`` with ``msg``."""
    return ChainedError(msg, error)