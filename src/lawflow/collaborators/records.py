"""Local JSON-file records backing the default collaborators.

Each collection is a list of JSON objects in its own file under the state
directory. A deployment with real tenants plugs its own task/case/job
stores into `Collaborators` instead.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from lawflow.workflow.actions import JobFields, TaskFields

logger = logging.getLogger(__name__)


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@dataclass
class JsonRecordStore:
    path: Path

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def _load_unlocked(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(
                "Record file is not valid JSON; treating as empty", extra={"path": str(self.path)}
            )
            return []
        if not isinstance(raw, list):
            return []
        return [item for item in raw if isinstance(item, dict)]

    def _save_unlocked(self, records: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(records, indent=2, ensure_ascii=False, default=str) + "\n",
            encoding="utf-8",
        )

    def all(self) -> list[dict[str, Any]]:
        with self._lock:
            return self._load_unlocked()

    def append(self, record: Mapping[str, Any]) -> str:
        """Persist a new record and return its generated id."""

        with self._lock:
            records = self._load_unlocked()
            record_id = uuid.uuid4().hex
            records.append({"id": record_id, "created_at": _utc_iso_now(), **_jsonable(record)})
            self._save_unlocked(records)
            return record_id

    def upsert(self, record_id: str, **updates: Any) -> dict[str, Any]:
        with self._lock:
            records = self._load_unlocked()
            now = _utc_iso_now()
            for idx, record in enumerate(records):
                if record.get("id") != record_id:
                    continue
                merged = {**record, **_jsonable(updates), "updated_at": now}
                records[idx] = merged
                self._save_unlocked(records)
                return merged
            created = {"id": record_id, "created_at": now, "updated_at": now, **_jsonable(updates)}
            records.append(created)
            self._save_unlocked(records)
            return created


class LocalTaskStore:
    def __init__(self, records: JsonRecordStore) -> None:
        self._records = records

    def create_task(self, tenant_id: str, fields: TaskFields) -> str:
        return self._records.append({"tenant_id": tenant_id, **asdict(fields)})


class LocalEntityStore:
    """Status per entity id (cases, by default)."""

    def __init__(self, records: JsonRecordStore) -> None:
        self._records = records

    def update_entity_status(self, entity_id: str, new_status: str) -> None:
        self._records.upsert(entity_id, status=new_status)

    def get_status(self, entity_id: str) -> str | None:
        for record in self._records.all():
            if record.get("id") == entity_id:
                status = record.get("status")
                return status if isinstance(status, str) else None
        return None


class LocalJobQueue:
    def __init__(self, records: JsonRecordStore) -> None:
        self._records = records

    def enqueue_analysis_job(self, tenant_id: str, fields: JobFields) -> str:
        return self._records.append({"tenant_id": tenant_id, **asdict(fields)})

    def pending(self, tenant_id: str) -> list[dict[str, Any]]:
        return [
            job
            for job in self._records.all()
            if job.get("tenant_id") == tenant_id and job.get("status") == "PENDING"
        ]


class LocalAssignmentService:
    def __init__(self, records: JsonRecordStore) -> None:
        self._records = records

    def assign_user(
        self, tenant_id: str, config: dict[str, Any], payload: Mapping[str, Any]
    ) -> None:
        user_id = config.get("userId") or config.get("assigneeId")
        if not user_id:
            raise ValueError("assign_user requires config.userId")
        entity_type = str(config.get("entityType") or "case")
        entity_id = config.get("entityId") or payload.get(f"{entity_type}Id")
        self._records.append(
            {
                "tenant_id": tenant_id,
                "user_id": str(user_id),
                "entity_type": entity_type,
                "entity_id": str(entity_id) if entity_id else None,
                "role": config.get("role"),
            }
        )


class LocalDocumentService:
    def __init__(self, records: JsonRecordStore) -> None:
        self._records = records

    def create_document(
        self, tenant_id: str, config: dict[str, Any], payload: Mapping[str, Any]
    ) -> str:
        case_id = config.get("caseId") or payload.get("caseId")
        return self._records.append(
            {
                "tenant_id": tenant_id,
                "name": str(config.get("name") or config.get("template") or "Untitled document"),
                "template": config.get("template"),
                "case_id": str(case_id) if case_id else None,
                "source": "workflow_automation",
            }
        )


class LocalReminderScheduler:
    def __init__(self, records: JsonRecordStore) -> None:
        self._records = records

    def schedule_reminder(
        self, tenant_id: str, config: dict[str, Any], payload: Mapping[str, Any]
    ) -> str:
        return self._records.append(
            {
                "tenant_id": tenant_id,
                "message": str(config.get("message") or "Reminder"),
                "remind_at": config.get("remindAt"),
                "channel": str(config.get("channel") or "email"),
                "context": dict(payload),
                "status": "SCHEDULED",
            }
        )
