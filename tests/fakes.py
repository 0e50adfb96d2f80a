from pathlib import Path

import fitz

from type_defs.segments import PdlaSegment


def write_pdf(path: Path, pages: int) -> Path:
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"page {i + 1}")
    doc.save(str(path))
    doc.close()
    return path


class FakeTaskStore:
    def __init__(self, file_name: str = "report.pdf"):
        self.file_name = file_name
        self.rows: dict[tuple[str, str], dict] = {}
        self.updates: list[dict] = []
        self.lookups = 0

    def get_file_name(self, task_id: str, user_id: str) -> str:
        self.lookups += 1
        self.rows.setdefault((task_id, user_id), {"status": "Starting", "finished_at": None})
        return self.file_name

    def update_task(self, task_id: str, user_id: str, fields: dict) -> None:
        self.updates.append(dict(fields))
        self.rows.setdefault((task_id, user_id), {}).update(fields)

    def row(self, task_id: str = "task-1", user_id: str = "user-1") -> dict:
        return self.rows[(task_id, user_id)]


class FakeArtifactStore:
    def __init__(self, objects: dict[str, bytes] | None = None):
        self.objects = dict(objects or {})
        self.downloads: list[str] = []
        self.uploads: list[tuple[str, str]] = []

    def download(self, location: str, output_path: Path) -> Path:
        self.downloads.append(location)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(self.objects[location])
        return output_path

    def upload(self, path: Path, location: str, content_type: str = "application/pdf") -> None:
        self.uploads.append((location, content_type))
        self.objects[location] = Path(path).read_bytes()


class FakeConverter:
    def __init__(self, pages: int = 2, error: Exception | None = None):
        self.pages = pages
        self.error = error
        self.calls: list[Path] = []

    def convert(self, input_path: Path, output_dir: Path) -> Path:
        self.calls.append(Path(input_path))
        if self.error is not None:
            raise self.error
        Path(output_dir).mkdir(parents=True, exist_ok=True)
        return write_pdf(Path(output_dir) / f"{Path(input_path).stem}.pdf", self.pages)


class FakeSegmenter:
    """One Text segment per page of each batch, pages numbered like the service (1-based)."""

    def __init__(self, error: Exception | None = None, fail_on_call: int = 1):
        self.error = error
        self.fail_on_call = fail_on_call
        self.calls: list[tuple[str, str]] = []
        self.batch_paths: list[Path] = []

    def segment(self, file_path: Path, model: str) -> list[PdlaSegment]:
        self.calls.append((Path(file_path).name, model))
        self.batch_paths.append(Path(file_path))
        if self.error is not None and len(self.calls) >= self.fail_on_call:
            raise self.error

        doc = fitz.open(str(file_path))
        pages = len(doc)
        doc.close()

        return [
            PdlaSegment(
                left=10,
                top=20,
                width=100,
                height=50,
                page_number=page + 1,
                page_width=612,
                page_height=792,
                text=f"page {page + 1}",
                type="Text",
            )
            for page in range(pages)
        ]


class FakePublisher:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.published: list[tuple[str, dict]] = []

    def publish(self, queue_name: str, payload: dict):
        if self.error is not None:
            raise self.error
        self.published.append((queue_name, payload))


class FakeRedis:
    def __init__(self):
        self.lists: dict[str, list[bytes]] = {}

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])

    def blpop(self, keys, timeout=0):
        for key in keys:
            items = self.lists.get(key)
            if items:
                return key.encode("utf-8"), items.pop(0)
        return None


