"""
Optional pretty-printing of generated Solidity.

A formatter is any callable text -> text. The generator treats it as a soft
dependency: when none is available, when it raises, or when it returns
something that is not text, the unformatted source is used unchanged.

prettier_formatter() wraps the `prettier` executable with
prettier-plugin-solidity, which is what most Solidity tooling formats with.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Callable, Optional

log = logging.getLogger(__name__)

__all__ = ["Formatter", "prettier_formatter", "apply_formatter"]

Formatter = Callable[[str], str]

_PRETTIER_ARGS = (
    "--plugin=prettier-plugin-solidity",
    "--parser=solidity-parse",
    "--stdin-filepath=Interface.sol",
)


def prettier_formatter(executable: Optional[str] = None, *, timeout: float = 30.0) -> Optional[Formatter]:
    """
    Return a formatter backed by `prettier`, or None if it cannot be found.

    `executable` may be a path or a command name; defaults to `prettier`.
    """
    path = shutil.which(executable or "prettier")
    if path is None:
        log.debug("prettier executable not found (%s)", executable or "prettier")
        return None

    def _format(text: str) -> str:
        out = subprocess.run(
            [path, *_PRETTIER_ARGS],
            input=text,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
        return out.stdout

    return _format


def apply_formatter(text: str, formatter: Optional[Formatter]) -> str:
    if formatter is None:
        return text
    try:
        formatted = formatter(text)
    except Exception as exc:
        log.debug("formatter failed, keeping unformatted output: %s", exc)
        return text
    if not isinstance(formatted, str) or not formatted.strip():
        log.debug("formatter returned no text, keeping unformatted output")
        return text
    return formatted
