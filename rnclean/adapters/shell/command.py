"""
Shell command adapter — execute external commands.

Runs an argv list (never through a shell) in the operation's own working
directory and captures stdout and stderr interleaved, the way they would
appear in a terminal, so the run log reads like a transcript.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path

from rnclean.adapters.base import Adapter, ExecutionContext
from rnclean.core.models.operation import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute commands and capture combined output.

    Operation params:
        argv (list[str]): The command and its arguments.
        input (str): Optional text fed to the command's stdin.
    """

    @property
    def name(self) -> str:
        return "shell"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.operation.params.get("argv")
        if not argv:
            return False, "Missing required param: 'argv'"
        if not isinstance(argv, list):
            return False, "Param 'argv' must be a list of strings"

        cwd = context.working_dir
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        op = context.operation
        argv = [str(a) for a in op.params["argv"]]
        stdin_text = op.params.get("input")
        timeout = context.effective_timeout
        cwd = context.working_dir

        logger.debug("Executing: %s (cwd=%s)", op.invocation, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                input=stdin_text,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
            )

            elapsed_ms = int((time.monotonic() - start) * 1000)
            output = (result.stdout or "").rstrip()

            if result.returncode == 0:
                return Receipt.success(
                    adapter=self.name,
                    operation_id=op.id,
                    output=output,
                    duration_ms=elapsed_ms,
                    metadata={"command": op.invocation, "return_code": 0},
                )
            return Receipt.failure(
                adapter=self.name,
                operation_id=op.id,
                error=f"Command exited with code {result.returncode}",
                output=output,
                duration_ms=elapsed_ms,
                metadata={"command": op.invocation, "return_code": result.returncode},
            )

        except subprocess.TimeoutExpired as e:
            partial = e.output.decode(errors="replace") if isinstance(e.output, bytes) else (e.output or "")
            return Receipt.failure(
                adapter=self.name,
                operation_id=op.id,
                error=f"Command timed out after {timeout}s",
                output=partial.rstrip(),
                metadata={"command": op.invocation, "timeout": timeout, "timed_out": True},
            )
        except FileNotFoundError:
            return Receipt.failure(
                adapter=self.name,
                operation_id=op.id,
                error=f"command not found: {argv[0]}",
                metadata={"command": op.invocation, "return_code": 127},
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                operation_id=op.id,
                error=f"Command execution error: {e}",
                metadata={"command": op.invocation},
            )
