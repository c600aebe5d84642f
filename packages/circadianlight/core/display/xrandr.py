"""Gamma applier backed by the ``xrandr`` command."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
import os
import re
import subprocess
from typing import Any

from circadianlight.core.errors import DisplayUnavailable
from circadianlight.core.schedule.models import GammaTriple

logger = logging.getLogger(__name__)

# "eDP-1 connected primary 1920x1080+0+0 (...)" / "HDMI-1 connected 1920x1080+1920+0 (...)"
_CONNECTED_RE = re.compile(r"^(\S+) connected( primary)?", re.MULTILINE)

XRANDR_TIMEOUT_S = 10.0

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def parse_connected_outputs(query_output: str) -> list[str]:
    """Extract connected output names from ``xrandr --query`` text.

    The primary output, if any, comes first; the rest keep xrandr order.

    Example:
        >>> parse_connected_outputs("HDMI-1 connected 1920x1080+0+0\\neDP-1 connected primary")
        ['eDP-1', 'HDMI-1']
    """
    primary: list[str] = []
    others: list[str] = []
    for match in _CONNECTED_RE.finditer(query_output):
        (primary if match.group(2) else others).append(match.group(1))
    return primary + others


def format_gamma(gamma: GammaTriple) -> str:
    """Render gains in xrandr ``R:G:B`` form with three decimals.

    Example:
        >>> format_gamma(GammaTriple(red=1.0, green=0.825, blue=0.725))
        '1.000:0.825:0.725'
    """
    return f"{gamma.red:.3f}:{gamma.green:.3f}:{gamma.blue:.3f}"


class XrandrGammaApplier:
    """Sets the gamma of one X output through ``xrandr --gamma``.

    Args:
        output: Output name; None resolves the primary (or first connected)
            output on every apply
        binary: xrandr executable name or path
        environ: Environment for the subprocess; defaults to os.environ
        runner: subprocess.run compatible callable
    """

    def __init__(
        self,
        output: str | None = None,
        binary: str = "xrandr",
        environ: Mapping[str, str] | None = None,
        runner: Runner = subprocess.run,
    ) -> None:
        self.output = output
        self.binary = binary
        self._environ = dict(os.environ if environ is None else environ)
        self._runner = runner

    def _run(self, *args: str) -> str:
        if not self._environ.get("DISPLAY"):
            raise DisplayUnavailable("No X display available ($DISPLAY is not set)")

        command = [self.binary, *args]
        logger.debug("Running %s", " ".join(command))
        kwargs: dict[str, Any] = {
            "capture_output": True,
            "text": True,
            "check": True,
            "env": self._environ,
            "timeout": XRANDR_TIMEOUT_S,
        }
        try:
            result = self._runner(command, **kwargs)
        except FileNotFoundError as e:
            raise DisplayUnavailable(f"'{self.binary}' not found; install xrandr") from e
        except subprocess.TimeoutExpired as e:
            raise DisplayUnavailable(f"'{self.binary}' timed out after {XRANDR_TIMEOUT_S}s") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise DisplayUnavailable(
                f"'{self.binary}' failed with exit code {e.returncode}: {stderr or 'no output'}",
                output=self.output,
            ) from e
        return result.stdout or ""

    def list_outputs(self) -> list[str]:
        """List connected outputs, primary first.

        Raises:
            DisplayUnavailable: If xrandr cannot be queried
        """
        return parse_connected_outputs(self._run("--query"))

    def resolve_output(self) -> str:
        """Return the configured output, or the primary/first connected one.

        Raises:
            DisplayUnavailable: If no connected output exists
        """
        if self.output:
            return self.output

        outputs = self.list_outputs()
        if not outputs:
            raise DisplayUnavailable("xrandr reports no connected outputs")
        return outputs[0]

    def apply(self, gamma: GammaTriple) -> str:
        """Apply gains to the resolved output.

        Returns:
            Output name the gains were applied to

        Raises:
            DisplayUnavailable: If the display cannot be reached or xrandr fails
        """
        output = self.resolve_output()
        value = format_gamma(gamma)
        self._run("--output", output, "--gamma", value)
        logger.debug("Applied gamma %s to %s", value, output)
        return output
