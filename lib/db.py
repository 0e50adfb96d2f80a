import psycopg2

from psycopg2 import pool

from lib.errors import PersistenceFailed
from type_defs.shared import TaskFields

TASK_COLUMNS = (
    "status",
    "message",
    "finished_at",
    "pdf_location",
    "page_count",
    "input_file_type",
)


def create_pool(database_url: str, minconn: int = 1, maxconn: int = 4):
    try:
        return pool.SimpleConnectionPool(minconn, maxconn, dsn=database_url)
    except psycopg2.Error as e:
        raise PersistenceFailed(f"Failed to connect to task store: {e}") from e


class PostgresTaskStore:
    """Task rows in the `tasks` table, keyed by task_id and user_id."""

    def __init__(self, connection_pool):
        self.pool = connection_pool

    def get_file_name(self, task_id: str, user_id: str) -> str:
        row = self._execute(
            "SELECT file_name FROM tasks WHERE task_id = %s AND user_id = %s",
            (task_id, user_id),
            fetch=True,
        )

        if row is None:
            raise PersistenceFailed(f"Task {task_id} not found for user {user_id}")

        return row[0] or ""

    def update_task(self, task_id: str, user_id: str, fields: TaskFields) -> None:
        unknown = set(fields) - set(TASK_COLUMNS)
        if unknown or not fields:
            raise PersistenceFailed(f"Invalid task columns: {sorted(unknown)}")

        columns = list(fields)
        assignments = ", ".join(f"{column} = %s" for column in columns)
        params = tuple(fields[column] for column in columns) + (task_id, user_id)

        self._execute(
            f"UPDATE tasks SET {assignments} WHERE task_id = %s AND user_id = %s",
            params,
        )

    def _execute(self, query: str, params: tuple, fetch: bool = False):
        try:
            conn = self.pool.getconn()
        except psycopg2.Error as e:
            raise PersistenceFailed(f"Failed to get task store connection: {e}") from e

        try:
            with conn:
                with conn.cursor() as cursor:
                    cursor.execute(query, params)
                    return cursor.fetchone() if fetch else None

        except psycopg2.Error as e:
            raise PersistenceFailed(f"Task store query failed: {e}") from e

        finally:
            self.pool.putconn(conn)
