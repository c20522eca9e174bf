"""Adapter around the external ``amphtml-validator`` command."""

from __future__ import annotations

import json
import subprocess
from typing import Callable, Optional

from ..logging import get_logger
from .findings import ValidationResult, parse_validator_output

DEFAULT_EXECUTABLE = "amphtml-validator"


class ValidatorUnavailableError(RuntimeError):
    """Raised when the validator cannot be run or returns an unusable report."""


class AmpValidator:
    """Validates raw markup and returns structured findings."""

    name = "amphtml-validator"

    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        *,
        timeout: Optional[float] = 60.0,
        runner: Callable[[str], str] | None = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self._runner = runner or self._cli_runner
        self.logger = get_logger("validator")

    def validate(self, html: str) -> ValidationResult:
        raw = self._runner(html)
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValidatorUnavailableError("Validator returned invalid JSON") from exc
        try:
            result = parse_validator_output(payload)
        except ValueError as exc:
            raise ValidatorUnavailableError(str(exc)) from exc
        self.logger.debug(
            "Validator status %s with %d findings", result.status, len(result.findings)
        )
        return result

    def _cli_runner(self, html: str) -> str:
        args = [self.executable, "--format=json", "-"]
        try:
            # A failing document exits non-zero but still prints its report.
            completed = subprocess.run(
                args,
                input=html,
                check=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:  # pragma: no cover - depends on environment
            raise ValidatorUnavailableError(
                f"Unable to locate '{self.executable}'. Install it with `npm install -g amphtml-validator`."
            ) from exc
        except subprocess.TimeoutExpired as exc:  # pragma: no cover - depends on environment
            raise ValidatorUnavailableError(
                f"Validator timed out after {self.timeout} seconds"
            ) from exc
        output = completed.stdout.strip()
        if not output:
            raise ValidatorUnavailableError(
                f"Validator exited with code {completed.returncode}: {completed.stderr.strip()}"
            )
        return output
