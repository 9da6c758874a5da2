"""
Safety backups of branch tips

A backup records where one or more branches pointed before a destructive
operation. Each backed up branch is kept as a ref under
refs/branch-manager/backups/<backup id>/<branch>, so the commits stay
reachable after the branch itself is deleted or moved. Backup ids start
with their creation time, e.g. 20241019-101500-merge.
"""

import re
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from .git_client import GitClient

BACKUP_NAMESPACE = "refs/branch-manager/backups"
STAMP_FORMAT = "%Y%m%d-%H%M%S"
BACKUP_ID_PATTERN = re.compile(r"^(?P<stamp>\d{8}-\d{6})-(?P<operation>[a-z][a-z-]*?)(?:-(?P<n>\d+))?$")


class Backup(BaseModel):
    id: str
    operation: str
    created_at: datetime
    branches: Dict[str, str] = Field(default_factory=dict, description="branch -> commit")


def parse_backup_id(backup_id: str) -> Optional[Backup]:
    match = BACKUP_ID_PATTERN.match(backup_id)
    if match is None:
        return None
    return Backup(
        id=backup_id,
        operation=match.group("operation"),
        created_at=datetime.strptime(match.group("stamp"), STAMP_FORMAT),
    )


class BackupStore:
    """Creates, lists, restores and prunes backup refs in one repository."""

    def __init__(self, git: GitClient):
        self.git = git

    def _refs(self) -> List[tuple]:
        lines = self.git.run(
            "for-each-ref", "--format=%(refname) %(objectname)", f"{BACKUP_NAMESPACE}/"
        ).lines()
        refs = []
        for line in lines:
            ref, sha = line.rsplit(" ", 1)
            refs.append((ref, sha))
        return refs

    def all(self) -> List[Backup]:
        """Backups oldest first; refs with an unrecognized id are skipped."""
        backups: Dict[str, Backup] = {}
        for ref, sha in self._refs():
            backup_id, _, branch = ref[len(BACKUP_NAMESPACE) + 1:].partition("/")
            if backup_id not in backups:
                parsed = parse_backup_id(backup_id)
                if parsed is None:
                    logger.debug(f"Skipping unrecognized backup ref {ref}")
                    continue
                backups[backup_id] = parsed
            backups[backup_id].branches[branch] = sha
        return sorted(backups.values(), key=lambda b: (b.created_at, b.id))

    def get(self, backup_id: str) -> Optional[Backup]:
        return next((b for b in self.all() if b.id == backup_id), None)

    def create(self, operation: str, branches: List[str], now: Optional[datetime] = None) -> str:
        stamp = (now or datetime.now()).strftime(STAMP_FORMAT)
        existing = {b.id for b in self.all()}
        backup_id = f"{stamp}-{operation}"
        n = 2
        while backup_id in existing:
            backup_id = f"{stamp}-{operation}-{n}"
            n += 1

        for branch in branches:
            sha = self.git.rev_parse(branch)
            self.git.run("update-ref", f"{BACKUP_NAMESPACE}/{backup_id}/{branch}", sha)
        logger.info(f"💾 Backup {backup_id}: {', '.join(branches)}")
        return backup_id

    def restore(self, backup: Backup, current_branch: Optional[str]) -> List[str]:
        """Point every backed up branch at its recorded commit, recreating deleted ones."""
        for branch, sha in backup.branches.items():
            if branch == current_branch:
                self.git.run("reset", "--hard", sha)
            else:
                self.git.run("branch", "-f", branch, sha)
            logger.info(f"⏪ Restored {branch} to {sha[:8]}")
        return list(backup.branches)

    def delete(self, backup: Backup) -> None:
        for branch in backup.branches:
            self.git.run("update-ref", "-d", f"{BACKUP_NAMESPACE}/{backup.id}/{branch}")

    def prune(self, retention_days: int, now: Optional[datetime] = None) -> List[str]:
        """Delete backups created more than retention_days ago."""
        cutoff = (now or datetime.now()) - timedelta(days=retention_days)
        pruned = []
        for backup in self.all():
            if backup.created_at < cutoff:
                self.delete(backup)
                pruned.append(backup.id)
        if pruned:
            logger.info(f"🧹 Pruned {len(pruned)} backups older than {retention_days} days")
        return pruned
