"""Plain-text export/import of setting values.

One line per setting: ``moduleId|category|displayName|value``. The split on
import is limited to four fields, so the value may itself contain ``|``;
the three identity fields cannot, and entries whose identity contains the
delimiter or whose value spans lines are left out of the export.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.converters import ConverterRegistry
from ..core.models import ModuleGroup, SettingEntry, SettingKey
from ..exceptions import FileOperationError

logger = logging.getLogger(__name__)

EXPORT_FILE_NAME = "ConfigManagerExport.txt"
DELIMITER = "|"
FIELD_COUNT = 4


@dataclass
class ExportResult:
    path: Path
    ok: bool
    written: int = 0
    skipped: int = 0
    error: Optional[str] = None


@dataclass
class ImportResult:
    path: Path
    ok: bool
    imported: int = 0
    skipped: int = 0
    malformed: int = 0
    error: Optional[str] = None


def _spans_lines(text: str) -> bool:
    """True if ``str.splitlines`` would not give back ``text`` unchanged."""
    return bool(text) and text.splitlines() != [text]


def format_line(module_id: str, entry: SettingEntry, value: object, converters: ConverterRegistry) -> str:
    identity = (module_id, entry.category, entry.name)
    for part in identity:
        if DELIMITER in part or _spans_lines(part):
            raise ValueError(f"identity field {part!r} cannot be exported")
    text = converters.to_string(value, entry.setting_type)
    if _spans_lines(text):
        raise ValueError(f"value of {entry.name!r} spans several lines")
    return DELIMITER.join(identity + (text,))


def export_lines(groups: Iterable[ModuleGroup], converters: ConverterRegistry) -> Tuple[List[str], int]:
    """Serialize every entry with a current value, in traversal order."""
    lines: List[str] = []
    skipped = 0
    for group in groups:
        for category in group.categories:
            for entry in category.settings:
                try:
                    value = entry.get()
                    if value is None:
                        continue
                    lines.append(format_line(group.module.module_id, entry, value, converters))
                except Exception as exc:
                    skipped += 1
                    logger.warning("Not exporting %s/%s: %s", group.module.module_id, entry.name, exc)
    return lines, skipped


def export_settings(groups: Sequence[ModuleGroup], path: Path, converters: ConverterRegistry) -> ExportResult:
    path = Path(path)
    lines, skipped = export_lines(groups, converters)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as handle:
            for line in lines:
                handle.write(line + "\n")
    except OSError as exc:
        error = FileOperationError(f"Failed to export settings: {exc}", file_path=str(path), operation="export")
        logger.error("%s", error)
        logger.debug("Export failure details: %s", error.to_dict())
        return ExportResult(path=path, ok=False, skipped=skipped, error=str(exc))

    logger.info("Settings exported to %s (%d written, %d skipped)", path, len(lines), skipped)
    return ExportResult(path=path, ok=True, written=len(lines), skipped=skipped)


def parse_line(line: str) -> Optional[Tuple[str, str, str, str]]:
    if not line.strip():
        return None
    parts = line.split(DELIMITER, FIELD_COUNT - 1)
    if len(parts) < FIELD_COUNT:
        return None
    return parts[0], parts[1], parts[2], parts[3]


def index_entries(groups: Iterable[ModuleGroup]) -> Dict[SettingKey, List[SettingEntry]]:
    index: Dict[SettingKey, List[SettingEntry]] = {}
    for group in groups:
        for entry in group.entries():
            key = (group.module.module_id, entry.category, entry.name)
            index.setdefault(key, []).append(entry)
    return index


def apply_lines(
    lines: Iterable[str],
    groups: Sequence[ModuleGroup],
    converters: ConverterRegistry,
    path: Path = Path(EXPORT_FILE_NAME),
) -> ImportResult:
    """Set every matched entry from ``lines``; bad lines are skipped."""
    index = index_entries(groups)
    result = ImportResult(path=Path(path), ok=True)
    for line in lines:
        if not line.strip():
            continue
        parsed = parse_line(line)
        if parsed is None:
            result.malformed += 1
            continue
        module_id, category, name, raw_value = parsed
        matches = index.get((module_id, category, name))
        if not matches:
            result.skipped += 1
            continue
        for entry in matches:
            try:
                entry.set(converters.from_string(raw_value, entry.setting_type))
                result.imported += 1
            except Exception as exc:
                result.skipped += 1
                logger.debug("Skipping import of %s: %s", line, exc)
    return result


def import_settings(groups: Sequence[ModuleGroup], path: Path, converters: ConverterRegistry) -> ImportResult:
    path = Path(path)
    if not path.exists():
        logger.warning("Import file not found: %s", path)
        return ImportResult(path=path, ok=False, error="not found")
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        error = FileOperationError(f"Failed to import settings: {exc}", file_path=str(path), operation="import")
        logger.error("%s", error)
        logger.debug("Import failure details: %s", error.to_dict())
        return ImportResult(path=path, ok=False, error=str(exc))

    result = apply_lines(lines, groups, converters, path)
    logger.info("Imported %d settings from %s", result.imported, path)
    return result
