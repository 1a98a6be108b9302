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

from abc import ABC, abstractmethod
from pathlib import Path
from subprocess import CompletedProcess


class GitInterface(ABC):
    """
    Runs git commands inside one repository.

    Implementations return None when git exits with an error, so callers can
    treat "no such object" and "command failed" the same way.
    """

    repo_path: Path

    @abstractmethod
    def run_git_text(
        self, args: list[str], input_text: str | None = None
    ) -> CompletedProcess[str] | None:
        """Run git with utf-8 text output."""

    @abstractmethod
    def run_git_binary(self, args: list[str]) -> CompletedProcess[bytes] | None:
        """Run git and keep its output as raw bytes."""

    def run_git_text_out(
        self, args: list[str], input_text: str | None = None
    ) -> str | None:
        result = self.run_git_text(args, input_text)
        return result.stdout if result is not None else None

    def run_git_binary_out(self, args: list[str]) -> bytes | None:
        result = self.run_git_binary(args)
        return result.stdout if result is not None else None
