from datetime import datetime, timezone

from core.interfaces import TaskStore
from lib.errors import InvalidStatusTransition
from type_defs.shared import Status, TERMINAL_STATUSES

ALLOWED_TRANSITIONS = {
    Status.Starting: (Status.Processing,),
    Status.Processing: (Status.Processing, Status.Succeeded, Status.Failed),
    Status.Succeeded: (),
    Status.Failed: (),
}


class TaskStatusTracker:
    """
    Owns the status/message/finished_at columns of one task row.

    Every call to `set_status` is exactly one store update. The tracker
    starts from Starting; a redelivered task goes back through
    Starting -> Processing, which is a no-op for the row.
    """

    def __init__(self, store: TaskStore, task_id: str, user_id: str):
        self.store = store
        self.task_id = task_id
        self.user_id = user_id
        self.status = Status.Starting

    def set_status(
        self,
        status: Status,
        message: str | None = None,
        finished_at: datetime | None = None,
    ):
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransition(
                f"Task {self.task_id}: {self.status.value} -> {status.value}"
            )

        if status in TERMINAL_STATUSES:
            finished_at = finished_at or datetime.now(timezone.utc)
        elif finished_at is not None:
            raise InvalidStatusTransition(
                f"Task {self.task_id}: finished_at set on non-terminal {status.value}"
            )

        self.store.update_task(
            self.task_id,
            self.user_id,
            {
                "status": status.value,
                "message": message or "",
                "finished_at": finished_at,
            },
        )
        self.status = status
