from pathlib import Path
from typing import Protocol

from type_defs.shared import TaskFields
from type_defs.segments import PdlaSegment


class TaskStore(Protocol):
    def get_file_name(self, task_id: str, user_id: str) -> str: ...

    def update_task(self, task_id: str, user_id: str, fields: TaskFields) -> None: ...


class ArtifactStore(Protocol):
    def download(self, location: str, output_path: Path) -> Path: ...

    def upload(
        self, path: Path, location: str, content_type: str = "application/pdf"
    ) -> None: ...


class Converter(Protocol):
    def convert(self, input_path: Path, output_dir: Path) -> Path: ...


class Segmenter(Protocol):
    def segment(self, file_path: Path, model: str) -> list[PdlaSegment]: ...


class Publisher(Protocol):
    def publish(self, queue_name: str, payload: dict) -> object: ...
