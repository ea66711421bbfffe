"""Sequential, fail-fast setup pipeline.

The orchestrator owns ordering and fail-fast semantics only. Printing is
delegated to `SetupHooks` so the CLI decides how steps are announced, and
process execution is delegated to a `CommandRunner`. The network identity is
resolved once by the caller and handed in, so the announced address and the
one written to `.env` are always the same.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from loguru import logger

from adapters.process_runner import run_command
from core.domain.models import SetupStep, StepOutcome, SyncResult
from core.errors import CommandError
from core.interfaces.runner import CommandRunner
from core.services.env_sync import EnvSynchronizer


@dataclass
class SetupHooks:
    """Optional callbacks for UI layers (announcements)."""

    env_exists: Callable[[Path], None] | None = None
    env_created: Callable[[SyncResult], None] | None = None
    step_start: Callable[[SetupStep], None] | None = None
    step_success: Callable[[SetupStep], None] | None = None
    step_failure: Callable[[SetupStep, int], None] | None = None


class SetupOrchestrator:
    """Runs setup steps strictly in order, aborting on the first failure.

    Before the first step the environment document must exist; when it does
    not, it is created through the synchronizer with `identity`. An existing
    document is left untouched.
    """

    def __init__(
        self,
        synchronizer: EnvSynchronizer,
        identity: str,
        *,
        project_root: Path,
        runner: CommandRunner = run_command,
        hooks: SetupHooks | None = None,
    ) -> None:
        self.synchronizer = synchronizer
        self.identity = identity
        self.project_root = project_root
        self.runner = runner
        self.hooks = hooks or SetupHooks()
        self.outcomes: list[StepOutcome] = []

    def ensure_env(self) -> SyncResult | None:
        """Create `.env` when missing. Returns `None` if it already existed."""

        if self.synchronizer.exists():
            logger.debug("{} already exists", self.synchronizer.env_path)
            if self.hooks.env_exists:
                self.hooks.env_exists(self.synchronizer.env_path)
            return None

        result = self.synchronizer.synchronize(self.identity)
        if self.hooks.env_created:
            self.hooks.env_created(result)
        return result

    def run(self, steps: Sequence[SetupStep]) -> int:
        """Run `steps` in order; return 0 or raise `CommandError`."""

        self.outcomes = []
        self.ensure_env()

        for step in steps:
            if self.hooks.step_start:
                self.hooks.step_start(step)

            returncode = self.runner(step.command, step.resolve_cwd(self.project_root))
            self.outcomes.append(StepOutcome(step=step, returncode=returncode))

            if returncode != 0:
                logger.error("Step '{}' failed with exit code {}", step.description, returncode)
                if self.hooks.step_failure:
                    self.hooks.step_failure(step, returncode)
                raise CommandError(step.description, returncode, step.command)

            if self.hooks.step_success:
                self.hooks.step_success(step)

        return 0
