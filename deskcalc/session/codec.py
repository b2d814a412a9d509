"""Line-oriented session file format.

Layout (one field per line, ``\\n`` separated)::

    0.10
    <number of calculations>
    <expression>          \\
    <outcome>             /  repeated per calculation
    <number of variables>
    <name>                \\
    <value>               /  repeated per variable

Outcomes are written with :func:`deskcalc.numeric.format_full`, failed
calculations as their error text. Variable values always use the full
precision form so a save/load cycle is lossless regardless of the display
precision.

Decoding is all-or-nothing for the header, the counts and the calculation
pairs: any problem raises :class:`FormatError` and nothing is returned. A
variable whose value is not a number is dropped on its own (the rest of the
file still loads) unless ``strict_variables=True`` is passed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from .. import numeric
from .model import Calculation, Session, VariableBinding

logger = logging.getLogger(__name__)

FORMAT_VERSION = "0.10"
FILE_SUFFIX = ".sch"

_COUNT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


class SessionError(Exception):
    """Base class for session load/save failures."""


class FormatError(SessionError):
    """The session data is malformed, truncated or of an unknown version."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class SessionIOError(SessionError, OSError):
    """The session file could not be opened for reading or writing."""


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------


def _single_line(text: str) -> str:
    return str(text).replace("\r", " ").replace("\n", " ")


def encode_session(session: Session) -> List[str]:
    lines = [FORMAT_VERSION, str(len(session.calculations))]
    for calc in session.calculations:
        lines.append(_single_line(calc.expression))
        if calc.is_error:
            lines.append(_single_line(calc.outcome))
        else:
            lines.append(numeric.format_full(calc.outcome))

    variables = session.persistable_variables()
    lines.append(str(len(variables)))
    for var in variables:
        lines.append(var.name)
        lines.append(numeric.format_full(var.value))
    return lines


def encode_session_text(session: Session) -> str:
    return "\n".join(encode_session(session)) + "\n"


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------


class _LineReader:
    """Pulls lines one at a time so a bad header stops reading immediately."""

    def __init__(self, lines: Iterable[str]):
        self._lines: Iterator[str] = iter(lines)
        self._pos = 0

    @property
    def line_no(self) -> int:
        return self._pos + 1

    def read(self, what: str) -> str:
        try:
            line = next(self._lines)
        except StopIteration:
            raise FormatError(f"unexpected end of data while reading {what}", self.line_no) from None
        self._pos += 1
        return line

    def read_count(self, what: str) -> int:
        line_no = self.line_no
        raw = self.read(what)
        if not _COUNT_RE.match(raw):
            raise FormatError(f"invalid {what}: {raw!r}", line_no)
        count = int(raw)
        if count < 0:
            raise FormatError(f"negative {what}: {count}", line_no)
        return count


def split_lines(text: str) -> List[str]:
    """Split file content into lines the way the session reader expects.

    A trailing newline does not produce an extra empty line, ``\\r`` before a
    newline is dropped, and interior empty lines are preserved.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def decode_session(data: Union[str, Iterable[str]], *, strict_variables: bool = False) -> Session:
    if isinstance(data, str):
        lines: Iterable[str] = split_lines(data)
    else:
        lines = (str(ln).rstrip("\r\n") for ln in data)
    reader = _LineReader(lines)

    version = reader.read("format version")
    if version != FORMAT_VERSION:
        raise FormatError(f"unsupported session format version {version!r}", 1)

    calculations: List[Calculation] = []
    for _ in range(reader.read_count("calculation count")):
        expression = reader.read("expression")
        outcome_text = reader.read("result")
        value = numeric.parse(outcome_text)
        if numeric.is_nan(value):
            calculations.append(Calculation(expression, outcome_text))
        else:
            calculations.append(Calculation(expression, value))

    variables: List[VariableBinding] = []
    for _ in range(reader.read_count("variable count")):
        line_no = reader.line_no
        name = reader.read("variable name")
        value_text = reader.read("variable value")
        value = numeric.parse(value_text)
        if numeric.is_nan(value):
            if strict_variables:
                raise FormatError(f"variable {name!r} has a non-numeric value {value_text!r}", line_no + 1)
            logger.debug("Skipping variable %r with non-numeric value %r", name, value_text)
            continue
        variables.append(VariableBinding(name, value))

    return Session(calculations=calculations, variables=variables)


# ----------------------------------------------------------------------
# File helpers
# ----------------------------------------------------------------------


def load_session_file(path: Union[str, Path], *, strict_variables: bool = False) -> Session:
    """Read and decode a session file; raises :class:`SessionError`."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SessionIOError(f"Can't read from file {path}: {e}") from e

    session = decode_session(text, strict_variables=strict_variables)
    logger.info(
        "Loaded session %s (%d calculations, %d variables)",
        path,
        len(session.calculations),
        len(session.variables),
    )
    return session


def save_session_file(path: Union[str, Path], session: Session) -> Path:
    path = Path(path)
    text = encode_session_text(session)
    try:
        with path.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
    except OSError as e:
        raise SessionIOError(f"Can't write to file {path}: {e}") from e
    logger.info("Saved session %s (%d calculations)", path, len(session.calculations))
    return path


__all__ = [
    "FILE_SUFFIX",
    "FORMAT_VERSION",
    "FormatError",
    "SessionError",
    "SessionIOError",
    "decode_session",
    "encode_session",
    "encode_session_text",
    "load_session_file",
    "save_session_file",
    "split_lines",
]
