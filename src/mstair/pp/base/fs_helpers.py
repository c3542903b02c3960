# File: src/mstair/pp/base/fs_helpers.py

from __future__ import annotations

import logging
from os import PathLike
from typing import IO, TypeAlias

import dotenv


__all__ = [
    "StrPath",
    "fs_load_dotenv",
]

StrPath: TypeAlias = str | PathLike[str]


def fs_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    verbose: bool = False,
    override: bool = False,
    interpolate: bool = True,
    encoding: str | None = "utf-8",
) -> bool:
    """
    Parse a .env file and then load all the variables found as environment variables.

    Both the log level configuration and the printer configuration read their
    settings from the environment, so they call this first.

    :param logger: Logger to use for warnings and info messages, if supplied verbose is enabled.
    :param dotenv_path: Absolute or relative path to .env file.
    :param stream: Text stream (such as `io.StringIO`) with .env content, used if `dotenv_path` is `None`.
    :param verbose: Whether to output a warning the .env file is missing.
    :param override: Whether to override the environment variables with the variables from the `.env` file.
    :param interpolate: Whether to interpolate environment variables in the .env file.
    :return: True if at least one environment variable is set else False

    If both `dotenv_path` and `stream` are `None`, `find_dotenv()` is used to find the
    .env file with its default parameters.
    """
    if logger is not None and bool(logger):
        dotenv.main.logger = logger
        verbose = True
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path,
        stream=stream,
        verbose=verbose,
        override=override,
        interpolate=interpolate,
        encoding=encoding,
    )


# End of file: src/mstair/pp/base/fs_helpers.py
