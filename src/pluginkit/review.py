from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Callable

from pluginkit.errors import PreconditionError, ValidationError
from pluginkit.templates import render

logger = logging.getLogger(__name__)

INSTALL_HINT = "npm install -g @openai/codex"

PERSPECTIVES: dict[str, str] = {
    "bugs": """Review the code in '{{ target }}' for bugs and logic errors.
Focus on: incorrect logic, off-by-one errors, null handling, race conditions, resource leaks.
Output format: [file:line] Issue description""",
    "security": """Review the code in '{{ target }}' for security vulnerabilities.
Focus on: injection attacks, auth flaws, data exposure, insecure dependencies.
Output format: [file:line] Issue description""",
    "edge-cases": """Review the code in '{{ target }}' for edge case handling.
Focus on: missing error handling, boundary conditions, empty inputs, timeouts.
Output format: [file:line] Issue description""",
}


def build_review_prompt(perspective: str, target: str = ".") -> str:
    template = PERSPECTIVES.get(perspective)
    if template is None:
        valid = "|".join(PERSPECTIVES)
        raise ValidationError(f"Unknown perspective: {perspective} (expected one of <{valid}>)")
    return render(template, {"target": target}, name=f"{perspective} prompt")


def review_command(prompt: str, executable: str = "codex") -> list[str]:
    # read-only sandbox: the reviewer must not modify the tree
    return [executable, "exec", "--sandbox", "read-only", prompt]


def run_review(
    perspective: str = "bugs",
    target: str = ".",
    *,
    executable: str = "codex",
    runner: Callable[..., subprocess.CompletedProcess] | None = None,
    which: Callable[[str], str | None] | None = None,
) -> int:
    runner = runner or subprocess.run
    which = which or shutil.which
    prompt = build_review_prompt(perspective, target)
    if which(executable) is None:
        raise PreconditionError(f"{executable} CLI not found. Install with: {INSTALL_HINT}")
    cmd = review_command(prompt, executable)
    logger.debug("running %s review of %s", perspective, target)
    proc = runner(cmd, check=False)
    return proc.returncode
