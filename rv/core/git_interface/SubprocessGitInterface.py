# -----------------------------------------------------------------------------
# rv - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of rv.
#
# rv is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------

import subprocess
from pathlib import Path

from loguru import logger

from rv.core.exceptions import git_not_found

from .interface import GitInterface

_LOG_LIMIT = 2000


def _truncate(text: str) -> str:
    return text[:_LOG_LIMIT] + ("...(truncated)" if len(text) > _LOG_LIMIT else "")


class SubprocessGitInterface(GitInterface):
    def __init__(self, repo_path: str | Path | None = None) -> None:
        if isinstance(repo_path, Path):
            self.repo_path = repo_path
        else:
            self.repo_path = Path(repo_path or ".")

    def _run(self, args: list[str], **kwargs) -> subprocess.CompletedProcess | None:
        cmd = ["git"] + args
        logger.debug(f"Running git command: {' '.join(cmd)} cwd={self.repo_path}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                check=True,
                cwd=str(self.repo_path),
                **kwargs,
            )
        except FileNotFoundError as e:
            raise git_not_found() from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="ignore")
            logger.debug(
                f"Git command failed: {' '.join(cmd)} code={e.returncode} stderr={stderr}"
            )
            return None

        logger.debug(f"git returncode: {result.returncode}")
        return result

    def run_git_text(
        self, args: list[str], input_text: str | None = None
    ) -> subprocess.CompletedProcess[str] | None:
        result = self._run(
            args, input=input_text, text=True, encoding="utf-8", errors="replace"
        )
        if result is not None and result.stdout:
            logger.debug(f"git stdout (text): {_truncate(result.stdout)}")
        return result

    def run_git_binary(self, args: list[str]) -> subprocess.CompletedProcess[bytes] | None:
        result = self._run(args)
        if result is not None and result.stdout:
            logger.debug(f"git stdout (binary length): {len(result.stdout)} bytes")
        return result
