"""Single git process invocation."""

import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from ..utils.logging import mask_credentials, mask_url


@dataclass
class GitCommandResult:
    """Outcome of one git invocation."""

    command: List[str]
    returncode: Optional[int]
    stdout: str = ''
    stderr: str = ''
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def error(self) -> str:
        if self.timed_out:
            return 'timed out'
        return self.stderr.strip() or f'exit status {self.returncode}'


def mask_command(cmd: List[str]) -> List[str]:
    """Return the command with credentials in URL arguments hidden."""
    return [mask_url(arg) if '://' in arg else arg for arg in cmd]


def run_git_command(
    cmd: List[str], work_dir: Optional[str] = None, timeout: Optional[int] = None
) -> GitCommandResult:
    """Run a git command and wait for it to finish.

    Only the exit status decides success; output is kept for logging.

    Args:
        cmd: Git command as list, starting with ``git``
        work_dir: Working directory
        timeout: Seconds before the process is killed

    Returns:
        Command result
    """
    masked = mask_command(cmd)
    logger.debug(f'Executing git command: {" ".join(masked)}')

    env = dict(os.environ, GIT_TERMINAL_PROMPT='0')

    try:
        process = subprocess.run(
            cmd,
            cwd=work_dir,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            text=True,
        )
    except subprocess.TimeoutExpired:
        logger.error(f'Git command timed out after {timeout} seconds: {" ".join(masked)}')
        return GitCommandResult(command=masked, returncode=None, timed_out=True)
    except OSError as e:
        logger.error(f'Git command execution failed: {e}')
        return GitCommandResult(command=masked, returncode=None, stderr=str(e))

    result = GitCommandResult(
        command=masked,
        returncode=process.returncode,
        stdout=process.stdout or '',
        stderr=mask_credentials(process.stderr or ''),
    )

    if not result.success:
        logger.debug(f'Git command failed: {" ".join(masked)} - {result.error}')

    return result

