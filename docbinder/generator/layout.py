"""Conversion of the intermediate XSL-FO markup into PDF."""

from __future__ import annotations

import logging
import shutil
import subprocess
import typing as typ
from xml.etree import ElementTree

from docbinder.errors import LayoutConversionError

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_FOP_EXECUTABLE = "fop"


class LayoutEngine(typ.Protocol):
    """Capability turning a markup file into a page-description file."""

    def convert(self, markup_file: Path, output_file: Path) -> None: ...


class FopLayoutEngine:
    """Run Apache FOP on the produced markup.

    Parameters
    ----------
    executable : str, optional
        Name or path of the ``fop`` launcher; names are looked up on ``PATH``.
    user_config : Path, optional
        FOP user configuration passed with ``-c``.
    timeout : float, optional
        Seconds to wait for FOP before giving up.
    """

    def __init__(
        self,
        executable: str = DEFAULT_FOP_EXECUTABLE,
        *,
        user_config: Path | None = None,
        timeout: float | None = 300,
    ) -> None:
        self.executable = executable
        self.user_config = user_config
        self.timeout = timeout

    def convert(self, markup_file: Path, output_file: Path) -> None:
        """Write ``output_file`` from ``markup_file``.

        Raises
        ------
        LayoutConversionError
            If the markup is not well-formed (with its line and column), FOP
            is missing, or FOP exits with an error.
        """
        check_well_formed(markup_file)
        command = self._command(markup_file, output_file)
        logger.debug("Generating: %s", output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            completed = subprocess.run(  # noqa: S603
                command,
                check=False,
                text=True,
                capture_output=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise LayoutConversionError(markup_file, str(exc)) from exc
        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout).strip()
            raise LayoutConversionError(
                markup_file, detail or f"fop exited with status {completed.returncode}"
            )

    def _command(self, markup_file: Path, output_file: Path) -> list[str]:
        executable = shutil.which(self.executable)
        if not executable:
            msg = f"Layout engine '{self.executable}' was not found on PATH."
            raise LayoutConversionError(markup_file, msg)
        command = [executable]
        if self.user_config is not None:
            logger.debug("Using FOP user config: %s", self.user_config)
            command += ["-c", str(self.user_config)]
        return [*command, "-fo", str(markup_file), "-pdf", str(output_file)]


def check_well_formed(markup_file: Path) -> None:
    """Parse ``markup_file`` and report the first syntax error by location.

    Raises
    ------
    LayoutConversionError
        Carrying the line and column of the error.
    """
    try:
        ElementTree.parse(markup_file)  # noqa: S314
    except ElementTree.ParseError as exc:
        line, column = exc.position
        raise LayoutConversionError(markup_file, str(exc), line=line, column=column) from exc


__all__ = ["DEFAULT_FOP_EXECUTABLE", "FopLayoutEngine", "LayoutEngine", "check_well_formed"]
