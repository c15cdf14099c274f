#!/usr/bin/env python3
"""
Cyclops: backdated commit generator that exposes how easily contribution
graphs are gamed
"""

import argparse
import logging
import os
import random
import re
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

logger = logging.getLogger("cyclops")

MIN_YEAR = 1900
MAX_YEAR = 2100
MAX_COMMITS_PER_DAY = 50
DAYS_IN_MONTH = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

ACTIVITY_FILE = "cyclops_activity.txt"

COMMIT_MESSAGES = [
    "Refactor authentication module",
    "Add comprehensive unit tests",
    "Optimize database queries",
    "Fix memory leak in parser",
    "Implement rate limiting middleware",
    "Update API documentation",
    "Add input validation layer",
    "Improve error handling",
    "Optimize build pipeline",
    "Add monitoring metrics",
    "Implement caching strategy",
    "Fix cross-platform compatibility",
    "Add security headers",
    "Optimize image compression",
    "Implement async processing",
    "Add logging framework",
    "Fix race condition bug",
    "Update dependency versions",
    "Add feature toggles",
    "Implement data migration",
    "Add integration tests",
    "Fix CSS responsiveness",
    "Optimize network requests",
    "Add encryption support",
]


class CyclopsError(Exception):
    """Base class for every error that ends a run."""


class InvalidFormatError(CyclopsError, ValueError):
    """Date string does not match YYYY-MM-DD."""


class OutOfRangeError(CyclopsError, ValueError):
    """A date field or the commit bound is outside its allowed range."""


class InvalidRangeError(CyclopsError, ValueError):
    """Start date falls after end date."""


class RepositoryInitFailedError(CyclopsError):
    pass


class FileIOFailedError(CyclopsError):
    pass


class CollaboratorCallFailedError(CyclopsError):
    pass


# Calendar


@dataclass(frozen=True, order=True)
class Date:
    """A calendar day with no time zone."""

    year: int
    month: int
    day: int

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def is_real(self) -> bool:
        """Check the day against the actual length of its month."""
        return self.day <= days_in_month(self.month, self.year)


DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
INT_RE = re.compile(r"[0-9]+")


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(month: int, year: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return DAYS_IN_MONTH[month - 1]


def parse_date(text: str) -> Date:
    """Parse a YYYY-MM-DD string.

    The day is only checked against 1..31 here; ``CommitOrchestrator.validate``
    rejects days past the end of their month.
    """
    match = DATE_RE.fullmatch(text)
    if not match:
        raise InvalidFormatError(f"Invalid date format: {text!r} (use YYYY-MM-DD)")

    year, month, day = (int(part) for part in match.groups())

    if not MIN_YEAR <= year <= MAX_YEAR:
        raise OutOfRangeError(f"Year {year} outside {MIN_YEAR}-{MAX_YEAR}")
    if not 1 <= month <= 12:
        raise OutOfRangeError(f"Month {month} outside 1-12")
    if not 1 <= day <= 31:
        raise OutOfRangeError(f"Day {day} outside 1-31")

    return Date(year, month, day)


def increment_date(date: Date) -> Date:
    """Return the next calendar day."""
    year, month, day = date.year, date.month, date.day + 1

    if day > days_in_month(month, year):
        day = 1
        month += 1
        if month > 12:
            month = 1
            year += 1

    return Date(year, month, day)


def compare_dates(first: Date, second: Date) -> int:
    """Return -1, 0 or 1 as first is before, equal to or after second."""
    a = (first.year, first.month, first.day)
    b = (second.year, second.month, second.day)
    return (a > b) - (a < b)


# Content generation


@dataclass
class CommitRequest:
    """Everything needed to forge one commit."""

    date: Date
    sequence: int
    message: str
    session_minutes: int
    changed_lines: int
    hour: int
    minute: int

    @property
    def timestamp(self) -> str:
        return f"{self.date} {self.hour:02d}:{self.minute:02d}:00"


class ContentGenerator:
    """Draws commit counts, messages and timing from one random generator."""

    def __init__(self, rng: random.Random):
        self.rng = rng

    def pick_commit_count(self, max_per_day: int) -> int:
        # Zero is expected: not every day has activity
        return self.rng.randint(0, max_per_day)

    def pick_message(self) -> str:
        return self.rng.choice(COMMIT_MESSAGES)

    def pick_session_minutes(self) -> int:
        return self.rng.randint(30, 210)

    def pick_changed_lines(self) -> int:
        return self.rng.randint(10, 110)

    def pick_time_of_day(self) -> Tuple[int, int]:
        return self.rng.randint(8, 21), self.rng.randint(0, 59)

    def build_request(self, date: Date, sequence: int) -> CommitRequest:
        """Draw the content of a single commit."""
        hour, minute = self.pick_time_of_day()
        return CommitRequest(
            date=date,
            sequence=sequence,
            message=self.pick_message(),
            session_minutes=self.pick_session_minutes(),
            changed_lines=self.pick_changed_lines(),
            hour=hour,
            minute=minute,
        )


class ActivityRecorder:
    """Appends cosmetic activity records to the shared activity file."""

    TEMPLATE = (
        "// Activity log: {date} #{number}\n"
        "// Session: {minutes} minutes of development work\n"
        "// Changes: {lines} lines modified\n"
        "/* Generated activity to demonstrate the meaninglessness of GitHub metrics */\n"
        "\n"
    )

    def __init__(self, path: Path):
        self.path = path

    def record(
        self, date: Date, commit_number: int, session_minutes: int, changed_lines: int
    ) -> None:
        """Append one record, opening and closing the file each time."""
        block = self.TEMPLATE.format(
            date=date, number=commit_number, minutes=session_minutes, lines=changed_lines
        )
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(block)
        except OSError as e:
            raise FileIOFailedError(f"Cannot write activity file {self.path}: {e}") from e


# Git collaborator


@dataclass
class CommandResult:
    """Outcome of a single git invocation."""

    ok: bool
    message: str = ""


class GitRepository:
    """Runs git in a working tree. Never raises for a failed command."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path

    def has_repository(self) -> bool:
        return (self.repo_path / ".git").exists()

    def init(self) -> CommandResult:
        self.repo_path.mkdir(parents=True, exist_ok=True)
        return self._run_git(["git", "init"])

    def set_identity(self, name: str, email: str) -> CommandResult:
        result = self._run_git(["git", "config", "user.name", name])
        if not result.ok:
            return result
        return self._run_git(["git", "config", "user.email", email])

    def stage_file(self, path: str) -> CommandResult:
        return self._run_git(["git", "add", "--", path])

    def commit(self, message: str, author_date: str) -> CommandResult:
        """Create a commit with author and committer date forged to author_date."""
        env = os.environ.copy()
        env.update(
            {
                "GIT_AUTHOR_DATE": author_date,
                "GIT_COMMITTER_DATE": author_date,
            }
        )
        return self._run_git(["git", "commit", "-m", message], env=env)

    def _run_git(self, cmd: List[str], env: dict = None) -> CommandResult:
        """Run a Git command in the repository directory."""
        logger.debug("Running %s in %s", " ".join(cmd), self.repo_path)
        try:
            proc = subprocess.run(
                cmd, cwd=self.repo_path, env=env, capture_output=True, text=True
            )
        except OSError as e:
            return CommandResult(ok=False, message=str(e))

        if proc.returncode != 0:
            output = (proc.stderr or proc.stdout).strip()
            return CommandResult(
                ok=False, message=f"{' '.join(cmd[:2])} exited {proc.returncode}: {output}"
            )
        return CommandResult(ok=True, message=proc.stdout.strip())


# Configuration


@dataclass
class Config:
    """Runtime settings that are not taken from the command line."""

    repo_path: Path
    activity_file: str = ACTIVITY_FILE
    user_name: str = "Cyclops"
    user_email: str = "cyclops@github.com"
    pause_seconds: float = 0.005
    random_seed: Optional[int] = None

    def validate(self) -> None:
        """Validate all configuration parameters."""
        errors = []

        if self.pause_seconds < 0:
            errors.append("pause_seconds must be >= 0")

        if not self.user_name or not self.user_email:
            errors.append("user_name and user_email must be set")

        if not self.activity_file or os.sep in self.activity_file or "/" in self.activity_file:
            errors.append("activity_file must be a plain file name")

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            )

    @property
    def activity_path(self) -> Path:
        return self.repo_path / self.activity_file


def create_default_config() -> Config:
    """Create default configuration."""
    return Config(repo_path=Path.cwd())


# Reporting


@dataclass
class RunSummary:
    """Totals accumulated over one run."""

    days_processed: int = 0
    total_commits: int = 0
    active_days: int = 0

    @property
    def average_per_active_day(self) -> float:
        if self.active_days == 0:
            return 0.0
        return self.total_commits / self.active_days


class Reporter:
    """Prints banner, progress and summary for a run."""

    BANNER = [
        "   ██████╗██╗   ██╗ ██████╗██╗      ██████╗ ██████╗ ███████╗",
        "  ██╔════╝╚██╗ ██╔╝██╔════╝██║     ██╔═══██╗██╔══██╗██╔════╝",
        "  ██║      ╚████╔╝ ██║     ██║     ██║   ██║██████╔╝███████╗",
        "  ██║       ╚██╔╝  ██║     ██║     ██║   ██║██╔═══╝ ╚════██║",
        "  ╚██████╗   ██║   ╚██████╗███████╗╚██████╔╝██║     ███████║",
        "   ╚═════╝   ╚═╝    ╚═════╝╚══════╝ ╚═════╝ ╚═╝     ╚══════╝",
    ]

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def banner(self) -> None:
        self._print()
        for line in self.BANNER:
            self._print(line)
        self._print()
        self._print("  Exposing the absurdity of GitHub-based hiring decisions")
        self._print("  Your coding ability shouldn't be judged by commit frequency")
        self._print()

    def usage(self, program: str) -> None:
        self.banner()
        self._print(f"Usage: {program} <start_date> <end_date> <max_commits_per_day>")
        self._print()
        self._print("Arguments:")
        self._print("  start_date           Start date in YYYY-MM-DD format")
        self._print("  end_date             End date in YYYY-MM-DD format")
        self._print(
            f"  max_commits_per_day  Maximum commits per day (1-{MAX_COMMITS_PER_DAY})"
        )
        self._print()
        self._print("Example:")
        self._print(f"  {program} 2024-01-01 2024-12-31 5")
        self._print()
        self._print("Remember: This tool exists to highlight broken hiring practices.")
        self._print("The goal is to expose the system, not to encourage deception.")

    def run_header(self, start: Date, end: Date, max_per_day: int) -> None:
        self.banner()
        self._print("Generating GitHub activity to expose hiring algorithm flaws...")
        self._print(f"Date range: {start} to {end}")
        self._print(f"Max commits per day: {max_per_day}\n")
        self._print("If this can fool hiring algorithms, maybe the problem isn't ")
        self._print("the candidates - it's the evaluation criteria.\n")

    def day(self, date: Date, count: int) -> None:
        self._print(f"Processing {date}: {count} commits")

    def summary(self, summary: RunSummary) -> None:
        self._print("\nCyclops has exposed the system!")
        self._print("━" * 62)
        self._print(f"Days processed: {summary.days_processed}")
        self._print(f"Total commits created: {summary.total_commits}")
        if summary.total_commits > 0:
            self._print(
                f"Average commits per active day: {summary.average_per_active_day:.2f}"
            )
        self._print(
            "\nYour GitHub graph is now green. Does this make you a better developer?"
        )
        self._print("Of course not. That's exactly the point.\n")
        self._print("Next steps:")
        self._print("1. Push to GitHub: git push -u origin main")
        self._print("2. Watch your contribution graph fill up")
        self._print("3. Remember: Green squares ≠ Coding ability")
        self._print("4. Help fix the hiring process, don't just game it\n")
        self._print(
            "The real solution is for the industry to evaluate developers based on:"
        )
        self._print("• Problem-solving skills")
        self._print("• Code quality and architecture")
        self._print("• Collaboration and communication")
        self._print("• Learning ability and adaptability")
        self._print("• NOT GitHub activity patterns\n")


# Orchestration


class CommitOrchestrator:
    """Walks the date range and forges commits day by day."""

    STATES = ["idle", "initializing", "iterating", "finished", "failed"]

    def __init__(
        self,
        config: Config,
        repository: Optional[GitRepository] = None,
        generator: Optional[ContentGenerator] = None,
        recorder: Optional[ActivityRecorder] = None,
        reporter: Optional[Reporter] = None,
        sleep=time.sleep,
    ):
        self.config = config
        self.repository = repository or GitRepository(config.repo_path)
        self.generator = generator or ContentGenerator(
            random.Random(config.random_seed)
        )
        self.recorder = recorder or ActivityRecorder(config.activity_path)
        self.reporter = reporter or Reporter()
        self.sleep = sleep
        self.state = "idle"

    @staticmethod
    def validate(start: Date, end: Date, max_per_day: int) -> None:
        """Check the run arguments before touching the repository."""
        if compare_dates(start, end) > 0:
            raise InvalidRangeError(
                f"Start date {start} must be before or equal to end date {end}"
            )

        if not 1 <= max_per_day <= MAX_COMMITS_PER_DAY:
            raise OutOfRangeError(
                f"max_commits_per_day must be between 1 and {MAX_COMMITS_PER_DAY}"
            )

        for date in (start, end):
            if not date.is_real():
                raise OutOfRangeError(
                    f"{date}: day {date.day} exceeds {days_in_month(date.month, date.year)}"
                    f" days in month {date.month}"
                )

    def ensure_repository_initialized(self) -> None:
        """Initialize Git repository if needed."""
        if self.repository.has_repository():
            return

        logger.info("Initializing Git repository at %s", self.config.repo_path)
        result = self.repository.init()
        if not result.ok:
            raise RepositoryInitFailedError(
                f"Failed to initialize Git repository: {result.message}"
            )

        result = self.repository.set_identity(
            self.config.user_name, self.config.user_email
        )
        if not result.ok:
            logger.warning("Could not set committer identity: %s", result.message)

    def run(self, start: Date, end: Date, max_per_day: int) -> RunSummary:
        """Forge commits for every day from start to end inclusive."""
        try:
            self.validate(start, end, max_per_day)

            self.state = "initializing"
            self.ensure_repository_initialized()
            self.reporter.run_header(start, end, max_per_day)

            self.state = "iterating"
            summary = RunSummary()
            current = start

            while compare_dates(current, end) <= 0:
                count = self.generator.pick_commit_count(max_per_day)

                if count > 0:
                    self.reporter.day(current, count)
                    for sequence in range(1, count + 1):
                        self._create_commit(self.generator.build_request(current, sequence))
                    summary.total_commits += count
                    summary.active_days += 1

                summary.days_processed += 1
                current = increment_date(current)
                self.sleep(self.config.pause_seconds)
        except BaseException:
            # KeyboardInterrupt included
            self.state = "failed"
            raise

        self.state = "finished"
        self.reporter.summary(summary)
        return summary

    def _create_commit(self, request: CommitRequest) -> None:
        """Record activity, stage it and commit with a forged timestamp."""
        self.recorder.record(
            request.date,
            request.sequence,
            request.session_minutes,
            request.changed_lines,
        )

        result = self.repository.stage_file(self.config.activity_file)
        if not result.ok:
            raise CollaboratorCallFailedError(
                f"Failed to stage {self.config.activity_file} for "
                f"{request.date} #{request.sequence}: {result.message}"
            )

        result = self.repository.commit(request.message, request.timestamp)
        if not result.ok:
            raise CollaboratorCallFailedError(
                f"Failed to create commit {request.sequence} for "
                f"{request.date}: {result.message}"
            )


# Command line


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that prints the full usage text and exits with 1."""

    def error(self, message: str) -> None:
        Reporter().usage(self.prog)
        self.exit(1, f"\nError: {message}\n")


def commit_bound(text: str) -> int:
    """argparse type for max_commits_per_day: ASCII digits only."""
    if not INT_RE.fullmatch(text):
        raise ValueError(f"not a whole number: {text!r}")
    return int(text)


def create_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="cyclops",
        description="Cyclops: fill a contribution graph with backdated commits",
        add_help=False,
    )
    parser.add_argument("start_date", help="Start date (YYYY-MM-DD)")
    parser.add_argument("end_date", help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "max_commits_per_day",
        type=commit_bound,
        help=f"Maximum commits per day (1-{MAX_COMMITS_PER_DAY})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    args = create_parser().parse_args(argv)

    try:
        start = parse_date(args.start_date)
        end = parse_date(args.end_date)
        CommitOrchestrator.validate(start, end, args.max_commits_per_day)

        config = create_default_config()
        config.validate()

        orchestrator = CommitOrchestrator(config)
        orchestrator.run(start, end, args.max_commits_per_day)
    except KeyboardInterrupt:
        logger.error("Interrupted; repository left in its current state")
        sys.exit(1)
    except (CyclopsError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
