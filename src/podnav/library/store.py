"""JSON-file persistence shared by the favorites and history stores."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Generic, TypeVar

import aiofiles
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from podnav.utils.errors import LibraryError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class JsonListStore(Generic[RecordT]):
    """A list of pydantic records kept in one JSON file.

    Writes go to a temp file that replaces the real one, so a crash never
    leaves a half-written file behind. A corrupt file is logged and read
    as empty.
    """

    record_type: type[RecordT]

    def __init__(self, path: Path) -> None:
        self.path = path

    async def _load(self) -> list[RecordT]:
        if not self.path.exists():
            return []

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
            raw = json.loads(content) if content.strip() else []
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON list, got {type(raw).__name__}")
            return [self.record_type.model_validate(item) for item in raw]
        except (json.JSONDecodeError, PydanticValidationError, ValueError) as e:
            logger.warning("Ignoring corrupt %s: %s", self.path, e)
            return []

    async def _save(self, records: list[RecordT]) -> None:
        data = [record.model_dump(mode="json") for record in records]
        temp_file = self.path.with_suffix(".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(temp_file, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2))
            await asyncio.to_thread(temp_file.replace, self.path)
        except OSError as e:
            if temp_file.exists():
                await asyncio.to_thread(temp_file.unlink, missing_ok=True)
            raise LibraryError(f"Failed to write {self.path}: {e}") from e
