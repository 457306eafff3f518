"""Branch issue sync — resubmits an issue-sync task for every branch needing one.

Triggered when the issues index is (re)created. The whole read-modify-write runs in one
transaction:
1. Delete the pending and completed tasks of the issue-sync type, with their characteristics
2. Flag every branch as needing issue sync and read them back
3. Order projects by most recent analysis, newest first; never-analysed projects go last
4. Submit one task per branch, grouped by project

A failure at any step rolls back the deletions as well, so a retrigger starts from the
same queue state.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from whenever import Instant

from quality_gate.config import BRANCH_ISSUE_SYNC

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Mapping

    import asyncpg

logger = logging.getLogger("quality_gate.reindex")

BRANCH_KEY = "branch"
PULL_REQUEST_KEY = "pullRequest"
BRANCH_TYPE_KEY = "branchType"


class BranchType(StrEnum):
    BRANCH = "BRANCH"
    PULL_REQUEST = "PULL_REQUEST"


class Branch(BaseModel):
    model_config = ConfigDict(frozen=True)

    uuid: str
    key: str
    project_uuid: str
    branch_type: BranchType


class TaskComponent(BaseModel):
    model_config = ConfigDict(frozen=True)

    uuid: str
    main_component_uuid: str


class TaskSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    uuid: str = Field(default_factory=lambda: str(uuid4()))
    task_type: str
    component: TaskComponent
    characteristics: dict[str, str]
    submitted_at: str = Field(default_factory=lambda: Instant.now().format_iso())


# =============================================================================
# PURE HELPERS
# =============================================================================


def sort_projects_by_last_analysis(
    project_uuids: Iterable[str],
    last_analysis: Mapping[str, Instant],
) -> list[str]:
    """Most recently analysed projects first; never-analysed ones last, in input order."""
    uuids = list(project_uuids)
    analysed = sorted(
        (u for u in uuids if u in last_analysis),
        key=lambda u: last_analysis[u],
        reverse=True,
    )
    never_analysed = [u for u in uuids if u not in last_analysis]
    return analysed + never_analysed


def build_task_submission(branch: Branch, task_type: str = BRANCH_ISSUE_SYNC) -> TaskSubmission:
    name_key = BRANCH_KEY if branch.branch_type == BranchType.BRANCH else PULL_REQUEST_KEY
    return TaskSubmission(
        task_type=task_type,
        component=TaskComponent(uuid=branch.uuid, main_component_uuid=branch.project_uuid),
        characteristics={
            name_key: branch.key,
            BRANCH_TYPE_KEY: branch.branch_type.value,
        },
    )


# =============================================================================
# STORE
# =============================================================================


class IssueSyncSession:
    """Queries of one issue-sync unit of work, bound to a connection inside a transaction."""

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def pending_task_uuids(self, task_type: str) -> list[str]:
        rows = await self._conn.fetch(
            """
            SELECT uuid FROM ce_queue
            WHERE task_type = $1
            ORDER BY created_at ASC
            """,
            task_type,
        )
        return [row["uuid"] for row in rows]

    async def delete_pending_tasks(self, uuids: list[str]) -> None:
        await self._conn.execute("DELETE FROM ce_queue WHERE uuid = ANY($1::text[])", uuids)

    async def completed_task_uuids(self, task_type: str) -> set[str]:
        rows = await self._conn.fetch(
            "SELECT uuid FROM ce_activity WHERE task_type = $1",
            task_type,
        )
        return {row["uuid"] for row in rows}

    async def delete_completed_tasks(self, uuids: set[str]) -> None:
        await self._conn.execute(
            "DELETE FROM ce_activity WHERE uuid = ANY($1::text[])", list(uuids)
        )

    async def delete_task_characteristics(self, task_uuids: set[str]) -> None:
        await self._conn.execute(
            "DELETE FROM ce_task_characteristics WHERE task_uuid = ANY($1::text[])",
            list(task_uuids),
        )

    async def flag_all_branches_need_issue_sync(self) -> None:
        await self._conn.execute("UPDATE project_branches SET need_issue_sync = TRUE")

    async def branches_needing_issue_sync(self) -> list[Branch]:
        rows = await self._conn.fetch(
            """
            SELECT uuid, kee, project_uuid, branch_type
            FROM project_branches
            WHERE need_issue_sync = TRUE
            ORDER BY project_uuid, kee
            """
        )
        return [
            Branch(
                uuid=row["uuid"],
                key=row["kee"],
                project_uuid=row["project_uuid"],
                branch_type=row["branch_type"],
            )
            for row in rows
        ]

    async def last_analysis_by_project(self, project_uuids: list[str]) -> dict[str, Instant]:
        rows = await self._conn.fetch(
            """
            SELECT component_uuid, created_at
            FROM snapshots
            WHERE islast = TRUE AND component_uuid = ANY($1::text[])
            """,
            project_uuids,
        )
        return {
            row["component_uuid"]: Instant.from_py_datetime(row["created_at"]) for row in rows
        }

    async def submit_tasks(self, tasks: list[TaskSubmission]) -> None:
        await self._conn.executemany(
            """
            INSERT INTO ce_queue
                (uuid, task_type, component_uuid, main_component_uuid, status, created_at)
            VALUES ($1, $2, $3, $4, 'PENDING', $5)
            """,
            [
                (
                    t.uuid,
                    t.task_type,
                    t.component.uuid,
                    t.component.main_component_uuid,
                    Instant.parse_iso(t.submitted_at).py_datetime(),
                )
                for t in tasks
            ],
        )
        await self._conn.executemany(
            """
            INSERT INTO ce_task_characteristics (uuid, task_uuid, kee, text_value)
            VALUES ($1, $2, $3, $4)
            """,
            [
                (str(uuid4()), t.uuid, key, value)
                for t in tasks
                for key, value in t.characteristics.items()
            ],
        )


class IssueSyncStore:
    """Opens issue-sync sessions on a pooled PostgreSQL connection."""

    def __init__(self, *, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @asynccontextmanager
    async def session(self) -> AsyncIterator[IssueSyncSession]:
        """One connection, one transaction: committed on exit, rolled back on error."""
        async with self._pool.acquire() as conn, conn.transaction():
            yield IssueSyncSession(conn)


# =============================================================================
# TRIGGER
# =============================================================================


class IssueSyncTrigger:
    def __init__(self, store: IssueSyncStore, *, task_type: str = BRANCH_ISSUE_SYNC) -> None:
        self._store = store
        self._task_type = task_type

    async def trigger_on_index_creation(self) -> list[TaskSubmission]:
        """Replace queued issue-sync work with one task per branch needing sync.

        Returns the submitted tasks, in submission order.
        """
        async with self._store.session() as session:
            await self._remove_existing_tasks(session)

            await session.flag_all_branches_need_issue_sync()
            branches = await session.branches_needing_issue_sync()
            logger.info("%d branch(es) found in need of issue sync", len(branches))
            if not branches:
                return []

            branches_by_project: dict[str, list[Branch]] = {}
            for branch in branches:
                branches_by_project.setdefault(branch.project_uuid, []).append(branch)
            logger.info("%d project(s) found in need of issue sync", len(branches_by_project))

            last_analysis = await session.last_analysis_by_project(list(branches_by_project))
            ordered = sort_projects_by_last_analysis(branches_by_project, last_analysis)

            tasks = [
                build_task_submission(branch, self._task_type)
                for project_uuid in ordered
                for branch in branches_by_project[project_uuid]
            ]
            await session.submit_tasks(tasks)
            logger.info("Submitted %d issue sync task(s)", len(tasks))
            return tasks

    async def _remove_existing_tasks(self, session: IssueSyncSession) -> None:
        pending = await session.pending_task_uuids(self._task_type)
        logger.info("%d pending indexation task(s) found to be deleted", len(pending))
        await session.delete_pending_tasks(pending)

        completed = await session.completed_task_uuids(self._task_type)
        logger.info("%d completed indexation task(s) found to be deleted", len(completed))
        await session.delete_completed_tasks(completed)

        logger.info("Deleting task characteristics")
        await session.delete_task_characteristics(set(pending) | completed)
        logger.info("Indexation task deletion complete")
