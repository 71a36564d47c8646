"""
Content loading - Read module content and the course catalog from JSON files.

Provides:
- JsonContentProvider: async, read-only access to module sections
- Module-id -> content file mapping (modules.yaml)
- Course catalog loading (courseList.json)
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional, Protocol

import yaml
from pydantic import ValidationError

from courseflow.errors import NotFound, ParseError
from courseflow.schemas import Course, ModuleContent, Section, sort_sections


logger = logging.getLogger(__name__)


class ContentProvider(Protocol):
    """Supplies the ordered sections of a module."""

    async def load(self, module_id: str) -> list[Section]:
        ...


# -----------------------------------------------------------------------------
# Module mapping
# -----------------------------------------------------------------------------

def load_module_mapping(path: str | Path) -> dict[str, str]:
    """
    Load the module-id -> content file table.

    The YAML file holds a `modules` mapping, e.g.:

        modules:
          CM_INTRO: change_management_intro.json

    Raises:
        FileNotFoundError: If the mapping file doesn't exist
        ValueError: If the file has no `modules` mapping
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Module mapping not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    modules = data.get("modules") if isinstance(data, dict) else None
    if not isinstance(modules, dict):
        raise ValueError(f"Module mapping {file_path} has no 'modules' table")
    return {str(module_id): str(filename) for module_id, filename in modules.items()}


# -----------------------------------------------------------------------------
# Content provider
# -----------------------------------------------------------------------------

class JsonContentProvider:
    """
    Load module sections from JSON content files.

    Each content file holds a list of module payloads; several modules may
    share one file. Files are read off the event loop.
    """

    def __init__(self, content_dir: str | Path, mapping: dict[str, str]):
        """
        Args:
            content_dir: Directory containing the content JSON files
            mapping: Module id -> file name inside content_dir
        """
        self.content_dir = Path(content_dir)
        self.mapping = dict(mapping)

    @classmethod
    def from_mapping_file(cls, content_dir: str | Path, mapping_path: str | Path) -> "JsonContentProvider":
        return cls(content_dir, load_module_mapping(mapping_path))

    def has_module(self, module_id: str) -> bool:
        return module_id in self.mapping

    async def load(self, module_id: str) -> list[Section]:
        """
        Load sections for a module, sorted by `order`.

        Raises:
            NotFound: No mapping, no file, or no entry for module_id
            ParseError: File is not valid JSON or the entry fails validation
        """
        filename = self.mapping.get(module_id)
        if filename is None:
            raise NotFound(module_id, f"No content mapping for module {module_id}")

        file_path = self.content_dir / filename
        raw = await asyncio.to_thread(self._read_file, module_id, file_path)
        return self._parse_module(module_id, raw, file_path)

    def _read_file(self, module_id: str, file_path: Path):
        if not file_path.exists():
            raise NotFound(module_id, f"Content file not found: {file_path}")
        try:
            text = file_path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(module_id, f"Content file {file_path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise ParseError(module_id, f"Could not read content file {file_path}: {e}") from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(module_id, f"Invalid JSON in {file_path}: {e}") from e

    def _parse_module(self, module_id: str, raw, file_path: Path) -> list[Section]:
        if not isinstance(raw, list):
            raise ParseError(module_id, f"Expected a list of modules in {file_path}")

        entry = next(
            (item for item in raw if isinstance(item, dict) and item.get("moduleId", item.get("module_id")) == module_id),
            None,
        )
        if entry is None:
            raise NotFound(module_id, f"Module {module_id} not present in {file_path}")

        try:
            module = ModuleContent.model_validate(entry)
        except ValidationError as e:
            raise ParseError(module_id, f"Malformed module {module_id} in {file_path}: {e}") from e

        sections = sort_sections(module.sections)
        logger.debug("Loaded %d sections for module %s", len(sections), module_id)
        return sections


# -----------------------------------------------------------------------------
# Course catalog
# -----------------------------------------------------------------------------

def load_course_catalog(path: str | Path) -> list[Course]:
    """
    Load the course catalog.

    The file maps course id -> course record; courses keep file order.

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        ValueError: If the catalog is not a JSON object of courses
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Course catalog not found: {file_path}")

    data = json.loads(file_path.read_text(encoding="utf-8-sig"))
    if not isinstance(data, dict):
        raise ValueError(f"Course catalog {file_path} must be a JSON object")

    courses = []
    for course_id, raw in data.items():
        record = {"courseId": course_id, **raw}
        try:
            courses.append(Course.model_validate(record))
        except ValidationError as e:
            raise ValueError(f"Invalid course {course_id} in {file_path}: {e}") from e
    return courses


def get_course(catalog: list[Course], course_id: str) -> Optional[Course]:
    """Find a course by id."""
    return next((course for course in catalog if course.course_id == course_id), None)
