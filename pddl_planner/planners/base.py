"""
Base classes for the planner plugin system.

Every planner is described by a `PlannerPlugin` subclass that knows:
  - metadata (key, name, description, ...)
  - which executable to call and how to detect whether it is installed
  - how to build its command line
  - where it leaves its plan files and how to parse them

The staging / invocation / timeout / cleanup protocol lives in
`PlannerPlugin.plan` and is the same for every planner.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
import signal
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple, Union

import psutil

from ..core.config import settings
from .errors import (
    AbnormalExitError,
    PlanParseError,
    PlannerNotFoundError,
    PlannerTimeoutError,
    StagingError,
)
from .models import GroundedAction, Plan, PlanCandidates

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────
# Data classes
# ────────────────────────────────────────────────────────

class PlannerStatus(str, Enum):
    READY = "ready"
    NOT_INSTALLED = "not_installed"


@dataclass
class PlannerInfo:
    """Serialisable snapshot of a planner's state - returned by the API."""
    key: str
    name: str
    version: str
    description: str
    command: str
    executable_path: Optional[str]
    status: str
    website: str
    category: str  # "builtin" | "configured"


# ────────────────────────────────────────────────────────
# Plan file grammar
# ────────────────────────────────────────────────────────

# "(stack a b)", "0: (stack a b)", "0.000: (stack a b) [1.000]"
_ACTION_LINE = re.compile(
    r"^(?:\d+(?:\.\d+)?\s*:\s*)?"
    r"\(\s*([^()\s]+)((?:\s+[^()\s]+)*)\s*\)"
    r"\s*(?:\[\s*\d+(?:\.\d+)?\s*\])?$"
)
_COST_COMMENT = re.compile(r"cost\s*=\s*(-?\d+(?:\.\d+)?)", re.IGNORECASE)


def _closing_paren(text: str) -> Optional[int]:
    """
    Index of the parenthesis that closes the last top-level form of *text*,
    or None when the text is not balanced.  ``;`` comments are skipped.
    """
    depth = 0
    closing = None
    in_comment = False
    for index, char in enumerate(text):
        if in_comment:
            in_comment = char != "\n"
        elif char == ";":
            in_comment = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return None
            if depth == 0:
                closing = index
    return closing if depth == 0 else None


def merge_domain(domain: str, actions: str) -> str:
    """
    Merge action extensions into a domain description.

    The actions go in front of the parenthesis closing the ``define`` block;
    a domain without a balanced ``define`` block simply gets them appended.
    """
    if not actions or not actions.strip():
        return domain
    closing = _closing_paren(domain)
    if closing is None:
        return f"{domain}\n{actions.strip()}\n"
    return f"{domain[:closing].rstrip()}\n{actions.strip()}\n{domain[closing:]}"


# ────────────────────────────────────────────────────────
# Abstract base plugin
# ────────────────────────────────────────────────────────

class PlannerPlugin(ABC):
    """
    Abstract base class for a planner plugin.

    Subclass this and implement the abstract members to add a new planner.
    Place the file under ``pddl_planner/planners/plugins/`` and it will be
    auto-discovered.
    """

    domain_filename = "domain.pddl"
    problem_filename = "problem.pddl"

    def __init__(self, staging_root: Optional[Union[str, Path]] = None) -> None:
        self._staging_root = Path(staging_root) if staging_root is not None else None

    # ── metadata (must override) ────────────────────────

    @property
    @abstractmethod
    def key(self) -> str:
        """Unique lowercase identifier, e.g. 'lama'."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name, e.g. 'LAMA'."""
        ...

    @property
    @abstractmethod
    def command(self) -> str:
        """Executable name looked up on PATH, or an absolute path."""
        ...

    @property
    def description(self) -> str:
        return ""

    @property
    def website(self) -> str:
        return ""

    @property
    def default_version(self) -> str:
        return "unknown"

    @property
    def category(self) -> str:
        return "builtin"

    @property
    def accepted_exit_codes(self) -> FrozenSet[int]:
        return frozenset({0})

    @property
    def result_basename(self) -> str:
        """Name of the result file handed to the planner."""
        return "plan"

    # ── paths ───────────────────────────────────────────

    @property
    def staging_root(self) -> Path:
        """Directory under which per-invocation staging areas are created."""
        if self._staging_root is not None:
            return self._staging_root
        return Path(settings.STAGING_PATH)

    def resolve_executable(self) -> Optional[str]:
        return shutil.which(self.command)

    # ── status ──────────────────────────────────────────

    def is_installed(self) -> bool:
        return self.resolve_executable() is not None

    def get_status(self) -> PlannerStatus:
        return PlannerStatus.READY if self.is_installed() else PlannerStatus.NOT_INSTALLED

    # ── execution ───────────────────────────────────────

    def build_command(
        self,
        executable: str,
        domain_path: Path,
        problem_path: Path,
        result_path: Path,
    ) -> List[str]:
        """
        Build the command line.  The default matches the IPC planner
        scripts: ``<planner> <domain> <problem> <result>``.
        """
        return [executable, str(domain_path), str(problem_path), str(result_path)]

    async def plan(
        self,
        problem: str,
        actions: str,
        domain: str,
        timeout: Optional[float] = None,
    ) -> PlanCandidates:
        """Run the planner on a problem and return its plan candidates."""
        if timeout is None:
            timeout = settings.DEFAULT_TIMEOUT

        executable = self.resolve_executable()
        if executable is None:
            msg = f"Could not find '{self.command}' executable"
            logger.error("%s: %s", self.key, msg)
            raise PlannerNotFoundError(msg, planner=self.key)

        # File I/O goes through the default executor so parallel runs are not held up
        loop = asyncio.get_running_loop()
        staging_dir = self.create_staging_area()
        try:
            domain_path, problem_path = await loop.run_in_executor(
                None, self.write_inputs, staging_dir, problem, actions, domain
            )
            result_path = staging_dir / self.result_basename
            cmd = self.build_command(executable, domain_path, problem_path, result_path)

            exit_code, _, stderr = await self._execute(cmd, staging_dir, timeout)
            if exit_code not in self.accepted_exit_codes:
                tail = stderr.strip().splitlines()[-1:] if stderr.strip() else []
                msg = f"{self.name} exited with status {exit_code}"
                if tail:
                    msg = f"{msg}: {tail[0]}"
                logger.warning("%s: %s", self.key, msg)
                raise AbnormalExitError(msg, planner=self.key, exit_code=exit_code)

            return await loop.run_in_executor(
                None, self.collect_candidates, staging_dir, result_path
            )
        finally:
            # Shielded: a second cancellation must not skip the cleanup
            await asyncio.shield(loop.run_in_executor(None, self.cleanup, staging_dir))

    # ── staging ─────────────────────────────────────────

    def create_staging_area(self) -> Path:
        """Create a fresh directory that no other invocation can share."""
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        path = self.staging_root / f"{stamp}_{self.key}_{uuid.uuid4().hex[:8]}"
        try:
            path.mkdir(parents=True, exist_ok=False)
        except OSError as exc:
            raise StagingError(
                f"Could not create staging directory {path}: {exc}", planner=self.key
            ) from exc
        return path.resolve()

    def write_inputs(
        self, staging_dir: Path, problem: str, actions: str, domain: str
    ) -> Tuple[Path, Path]:
        domain_path = staging_dir / self.domain_filename
        problem_path = staging_dir / self.problem_filename
        try:
            domain_path.write_text(merge_domain(domain, actions), encoding="utf-8")
            problem_path.write_text(problem, encoding="utf-8")
        except OSError as exc:
            raise StagingError(
                f"Could not write planner input in {staging_dir}: {exc}", planner=self.key
            ) from exc
        return domain_path, problem_path

    def cleanup(self, staging_dir: Path) -> None:
        """Remove everything the invocation created, keeping the directory itself."""
        if not staging_dir.is_dir():
            return
        for entry in staging_dir.iterdir():
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as exc:
                logger.error("Cleanup of %s failed: %s", entry, exc)

    # ── process handling ────────────────────────────────

    async def _execute(
        self, cmd: List[str], cwd: Path, timeout: float
    ) -> Tuple[int, str, str]:
        """
        Run *cmd* in *cwd*, bounded by *timeout*.
        Returns (return_code, stdout, stderr).
        """
        logger.debug("%s: running %s", self.key, " ".join(cmd))
        start = time.time()
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=(os.name != "nt"),
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise PlannerNotFoundError(
                f"Cannot execute {cmd[0]}: {exc}", planner=self.key
            ) from exc

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        except asyncio.TimeoutError:
            self._kill_process_tree(process.pid)
            try:
                await asyncio.wait_for(process.wait(), timeout=settings.KILL_GRACE_SECONDS)
            except asyncio.TimeoutError:
                logger.error("%s: process %d did not exit after kill", self.key, process.pid)
            logger.warning("%s: timeout (%.1fs) exceeded", self.key, timeout)
            raise PlannerTimeoutError(
                f"Timeout ({timeout:g}s) exceeded", planner=self.key, timeout=timeout
            )
        except BaseException:
            # Cancelled (Ctrl-C, dropped request): the planner runs in its own
            # session and never sees the terminal's SIGINT
            if process.returncode is None:
                logger.warning("%s: run cancelled, killing process %d", self.key, process.pid)
                self._kill_process_tree(process.pid)
            raise

        stdout = stdout_bytes.decode("utf-8", errors="ignore")
        stderr = stderr_bytes.decode("utf-8", errors="ignore")
        logger.debug(
            "%s: exit %s after %.2fs\n%s",
            self.key, process.returncode, time.time() - start,
            stdout[: settings.OUTPUT_CAPTURE_LIMIT],
        )
        return process.returncode, stdout, stderr

    @staticmethod
    def _kill_process_tree(pid: int) -> None:
        """Kill *pid* and everything it spawned."""
        try:
            parent = psutil.Process(pid)
            procs = parent.children(recursive=True) + [parent]
        except psutil.NoSuchProcess:
            procs = []

        if os.name != "nt":
            # The planner runs in its own session, so its group id is its pid
            try:
                os.killpg(pid, signal.SIGKILL)
            except (ProcessLookupError, PermissionError):
                pass
        for proc in procs:
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                pass

    # ── output parsing ──────────────────────────────────

    def discover_candidates(self, staging_dir: Path, result_path: Path) -> List[Path]:
        """
        Locate the plan files of a run.  Covers single-file planners
        (``plan``) and anytime planners writing ``plan.1``, ``plan.2``, ...
        """
        found: List[Path] = []
        if result_path.is_file():
            found.append(result_path)
        numbered = []
        for path in staging_dir.glob(f"{result_path.name}.*"):
            suffix = path.name[len(result_path.name) + 1:]
            if suffix.isdigit() and path.is_file():
                numbered.append((int(suffix), path))
        found.extend(path for _, path in sorted(numbered))
        return found

    def collect_candidates(self, staging_dir: Path, result_path: Path) -> PlanCandidates:
        plans = []
        for path in self.discover_candidates(staging_dir, result_path):
            try:
                text = path.read_text(encoding="utf-8", errors="ignore")
            except OSError as exc:
                raise StagingError(f"Could not read {path}: {exc}", planner=self.key) from exc
            plans.append(self.parse_plan(text, source=path.name))
        logger.debug("%s: %d plan candidate(s)", self.key, len(plans))
        return PlanCandidates(plans)

    def parse_plan(self, text: str, source: str = "") -> Plan:
        """
        Parse one plan file.  Override for planners with a different layout.
        """
        actions: List[GroundedAction] = []
        cost: Optional[float] = None
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue
            if line.startswith(";"):
                m = _COST_COMMENT.search(line)
                if m:
                    cost = float(m.group(1))
                continue
            m = _ACTION_LINE.match(line)
            if not m:
                raise PlanParseError(
                    f"{source or 'plan'}:{lineno}: cannot parse plan line {line!r}",
                    planner=self.key,
                )
            actions.append(GroundedAction(m.group(1), tuple(m.group(2).split())))
        return Plan(actions=tuple(actions), cost=cost, source=source or None)

    # ── serialisation ───────────────────────────────────

    def to_info(self) -> PlannerInfo:
        """Build a PlannerInfo snapshot for the API."""
        return PlannerInfo(
            key=self.key,
            name=self.name,
            version=self.default_version,
            description=self.description,
            command=self.command,
            executable_path=self.resolve_executable(),
            status=self.get_status().value,
            website=self.website,
            category=self.category,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} key={self.key!r}>"
