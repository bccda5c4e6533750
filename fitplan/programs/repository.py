"""Program storage.

The API layer talks to storage through ``ProgramStore``. The in-memory store
is what the app factory wires by default and what tests use; a database-backed
store only has to implement the same two methods.
"""

import copy
import threading
from datetime import datetime
from typing import Any, Protocol

from loguru import logger
from pydantic import BaseModel, Field


class ProgramRecord(BaseModel):
    """Persisted program row.

    Attributes:
        id: Program UUID
        user_id: Owner user ID
        start_date: Program-level default start date (YYYY-MM-DD)
        program_json: Program payload
        scheduling_preferences: Preferences applied by the last full scheduling
        last_scheduled_at: When the schedule was last written (set by the caller)
    """

    id: str
    user_id: str
    start_date: str | None = None
    program_json: dict[str, Any] = Field(default_factory=dict)
    scheduling_preferences: dict[str, Any] | None = None
    last_scheduled_at: datetime | None = None


class ProgramStore(Protocol):
    def get_program(self, program_id: str) -> ProgramRecord | None: ...

    def update_program_fields(self, program_id: str, **fields: Any) -> ProgramRecord: ...


class InMemoryProgramStore:
    """Dict-backed ProgramStore.

    Records are copied on the way in and out so callers never share state with
    the store. Concurrent writers to the same program are last-write-wins.
    """

    _UPDATABLE_FIELDS = frozenset({"start_date", "program_json", "scheduling_preferences", "last_scheduled_at"})

    def __init__(self, records: list[ProgramRecord] | None = None) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, ProgramRecord] = {}
        for record in records or []:
            self.add_program(record)

    def add_program(self, record: ProgramRecord) -> None:
        with self._lock:
            self._records[record.id] = record.model_copy(deep=True)

    def get_program(self, program_id: str) -> ProgramRecord | None:
        with self._lock:
            record = self._records.get(program_id)
            return record.model_copy(deep=True) if record else None

    def update_program_fields(self, program_id: str, **fields: Any) -> ProgramRecord:
        """Update selected fields of a stored program.

        Raises:
            KeyError: If the program does not exist
            ValueError: If a field is not updatable
        """
        unknown = set(fields) - self._UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")

        with self._lock:
            record = self._records.get(program_id)
            if record is None:
                raise KeyError(program_id)
            updated = record.model_copy(update=copy.deepcopy(fields))
            self._records[program_id] = updated

        logger.debug(f"Program {program_id} updated fields: {', '.join(sorted(fields))}")
        return updated.model_copy(deep=True)
