"""Argos Translate provider running a local helper script (one-shot only).

The helper reads source text on stdin and writes the translation to stdout:
`<python> <script> --from <code> --to <code>`.
"""

from __future__ import annotations

from pathlib import Path
import shutil
import subprocess

from ...errors import ProviderError
from ...locales import LocaleCodeTable
from ..rate_limiter import RateLimiter
from .base import ProviderBase


class ArgosSubprocessProvider(ProviderBase):
    """Translate by invoking the Argos helper script once per text."""

    provider_id = "argos"

    def __init__(
        self,
        *,
        script_path: Path,
        python_executable: str = "python3",
        timeout_seconds: float = 120.0,
        rate_limiter: RateLimiter | None = None,
        codes: LocaleCodeTable | None = None,
    ) -> None:
        """Initialize helper script location and process settings."""

        super().__init__(rate_limiter=rate_limiter, codes=codes)
        self.script_path = script_path
        self.python_executable = python_executable
        self.timeout_seconds = timeout_seconds

    def translate_one(self, text: str, source_code: str, target_code: str) -> str:
        """Run the helper once and return its trimmed stdout."""

        command = [
            shutil.which(self.python_executable) or self.python_executable,
            str(self.script_path),
            "--from",
            source_code,
            "--to",
            target_code,
        ]
        self.rate_limiter.acquire()
        try:
            result = subprocess.run(
                command,
                input=text,
                check=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise ProviderError(
                f"argos interpreter `{self.python_executable}` was not found.",
                failure_kind="missing_executable",
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProviderError(
                f"argos helper timed out after {self.timeout_seconds:g}s.",
                failure_kind="timeout",
            ) from exc

        if result.returncode != 0:
            details = " ".join((result.stderr or "").split()) or "unknown error"
            raise ProviderError(
                f"argos helper exited with code {result.returncode}: {details}",
                failure_kind="process_error",
            )
        return (result.stdout or "").strip()
