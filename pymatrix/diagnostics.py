"""
Diagnostic log redirection.

The matrix core performs no logging of its own. These helpers capture
diagnostic output into timestamped files, one line per message:

    [11:51:57] 29/01/22 : message

redirect_stream captures a standard stream (stderr by default) and writes
the file when the context exits. log_to_file attaches a file handler to a
logger for the duration of a context. test_log_path builds the
``log/<suite>/<test>.log`` layout used by the test suite.
"""

import contextlib
import io
import logging
import re
import time
from os import PathLike
from pathlib import Path
from typing import Iterator, Literal

TIMESTAMP_FORMAT = '[%H:%M:%S] %d/%m/%y'

_UNSAFE = re.compile(r'[\[\]/\\]+')


def _prefix() -> str:
    return time.strftime(TIMESTAMP_FORMAT, time.localtime()) + ' : '


@contextlib.contextmanager
def redirect_stream(
    filename: str | PathLike,
    stream: Literal['stderr', 'stdout'] = 'stderr',
) -> Iterator[io.StringIO]:
    """
    Capture a standard stream into a timestamped log file.

    Everything written to the stream inside the context is buffered and,
    on exit, written to filename with a ``[HH:MM:SS] DD/MM/YY : `` prefix
    on every line. The stream is restored even if the body raises.

    Args:
        filename: Log file to create (truncated if it exists)
        stream: 'stderr' or 'stdout'

    Raises:
        ValueError: If stream is not 'stderr' or 'stdout'
        OSError: If filename cannot be opened for writing

    Example:
        >>> with redirect_stream('run.log'):
        ...     print('starting', file=sys.stderr)
    """
    if stream == 'stderr':
        redirect = contextlib.redirect_stderr
    elif stream == 'stdout':
        redirect = contextlib.redirect_stdout
    else:
        raise ValueError(f"stream must be 'stderr' or 'stdout', got {stream!r}")

    # Open first so a bad path fails before anything is captured
    with Path(filename).open('w', encoding='utf-8') as out:
        buffer = io.StringIO()
        try:
            with redirect(buffer):
                yield buffer
        finally:
            for line in buffer.getvalue().splitlines():
                out.write(_prefix() + line + '\n')


@contextlib.contextmanager
def log_to_file(
    filename: str | PathLike,
    logger: str = 'pymatrix',
    level: int = logging.DEBUG,
) -> Iterator[logging.Logger]:
    """
    Send a logger's records to a timestamped file for the duration of a context.

    Args:
        filename: Log file to append to
        logger: Logger name
        level: Minimum level captured

    Yields:
        The configured logger
    """
    target = logging.getLogger(logger)
    handler = logging.FileHandler(filename, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(asctime)s : %(message)s', datefmt=TIMESTAMP_FORMAT))

    previous = target.level
    target.addHandler(handler)
    target.setLevel(level)
    try:
        yield target
    finally:
        target.removeHandler(handler)
        target.setLevel(previous)
        handler.close()


def test_log_path(root: str | PathLike, suite: str, test: str) -> Path:
    """
    Path of the log file for one test, creating its directory.

    Returns ``root/log/<suite>/<test>.log``. Parametrised ids such as
    ``test_add[ref]`` are flattened to ``test_add.ref`` so the id never
    introduces extra directories.
    """
    directory = Path(root) / 'log' / _sanitise(suite)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"{_sanitise(test)}.log"


# not a pytest test
test_log_path.__test__ = False


def _sanitise(name: str) -> str:
    return _UNSAFE.sub('.', name).strip('.') or '_'
