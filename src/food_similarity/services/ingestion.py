"""Ingestion of USDA SR28 per-food CSV reports into a food store."""

import logging
import os
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

from food_similarity.domain.diets import FoodCategory, require_category
from food_similarity.domain.errors import FormatError
from food_similarity.domain.foods import FoodRecord
from food_similarity.domain.nutrients import (
    Nutrient,
    lookup_report_nutrient,
    normalize_intake,
)

REPORT_BANNER = (
    "Source: USDA National Nutrient Database for Standard Reference 28 "
    "Software v.2.3.2"
)
REPORT_SUFFIX = ".csv"
# Offsets into the columns after the quoted nutrient name.
_UNIT_COLUMN = 1
_PER_100G_COLUMN = 2
_IDENTITY_PREFIX = '"Nutrient data for'
_LABELED_STEM = re.compile(r"^(?P<name>.*)_(?P<ordinal>[1-9]|1[0-7])$")

_logger = logging.getLogger(__name__)


class FoodSink(Protocol):
    """Store interface used by ingestion."""

    def present_source_ids(self) -> set[str]:
        """Return the source ids already stored."""

    def append(self, food: FoodRecord) -> None:
        """Append a record in a single write."""


class FoodLabeler(Protocol):
    """Supplies a display name and category for an unlabeled report."""

    def label(self, raw_name: str, path: Path) -> tuple[str, FoodCategory]:
        """Return the display name and category for a report."""


class FileRenamer(Protocol):
    """Renames a processed report so its label is encoded for later runs."""

    def rename(self, path: Path, target: Path) -> None:
        """Rename path to target."""


class PathRenamer(FileRenamer):
    """Renames files on the local filesystem."""

    def rename(self, path: Path, target: Path) -> None:
        """Rename path to target, refusing to replace an existing file."""
        if target.exists():
            raise FileExistsError(f"{target.name} already exists")
        path.rename(target)


class IngestStatus(str, Enum):
    """Outcome of a single report ingestion."""

    ADDED = "added"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class ParsedReport:
    """Contents of a raw report before labeling."""

    source_id: str
    raw_name: str
    values: dict[Nutrient, float]


@dataclass(frozen=True)
class IngestResult:
    """Result of ingesting one report."""

    status: IngestStatus
    source_id: str
    name: str
    path: Path


@dataclass
class BatchSummary:
    """Counts and failures of a directory ingestion."""

    added: list[IngestResult] = field(default_factory=list)
    duplicates: list[IngestResult] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return (
            len(self.added)
            + len(self.duplicates)
            + len(self.skipped)
            + len(self.failed)
        )


def parse_report(lines: Iterable[str]) -> ParsedReport:
    """Parse a raw report, raising FormatError if it is malformed."""
    stream = iter(lines)
    source_id, raw_name = read_report_identity(stream)
    return ParsedReport(
        source_id=source_id, raw_name=raw_name, values=parse_nutrient_rows(stream)
    )


def read_report_identity(stream: Iterator[str]) -> tuple[str, str]:
    """Check the banner and return (source_id, raw_name), leaving rows unread."""
    header = next(stream, None)
    if header is None or header.rstrip("\r\n") != REPORT_BANNER:
        raise FormatError(
            "Illegal input file format. Use USDA National Nutrient Database .csv file."
        )
    return _parse_identity(_identity_line(stream))


def parse_nutrient_rows(stream: Iterable[str]) -> dict[Nutrient, float]:
    """Normalize the quoted nutrient rows that follow the identity line."""
    values = {}
    for line in stream:
        if not line.startswith('"'):
            continue
        nutrient, value = _parse_nutrient_row(line.rstrip("\r\n"))
        if nutrient is not None:
            values[nutrient] = normalize_intake(nutrient, value)
    return values


def _identity_line(stream: Iterator[str]) -> str:
    for line in stream:
        if not line.startswith('"'):
            continue
        identity = line.rstrip("\r\n")
        if not identity.startswith(_IDENTITY_PREFIX):
            raise FormatError(
                "Expected a 'Nutrient data for' line before any quoted line, "
                f"got: {identity}"
            )
        return identity
    raise FormatError("Report has no 'Nutrient data for' line")


def _parse_identity(line: str) -> tuple[str, str]:
    # "Nutrient data for: 09003, Apples, raw, with skin"
    parts = line.split('"')
    if len(parts) < 2 or ":" not in parts[1]:  # noqa: PLR2004
        raise FormatError(f"Malformed food identity line: {line}")
    _, _, identity = parts[1].partition(":")
    source_id, separator, raw_name = identity.partition(",")
    if not separator or not source_id.strip():
        raise FormatError(f"Malformed food identity line: {line}")
    return source_id.strip(), raw_name.strip()


def _parse_nutrient_row(line: str) -> tuple[Nutrient | None, float]:
    parts = line.split('"')
    if len(parts) < 3:  # noqa: PLR2004
        raise FormatError(f"Malformed nutrient line: {line}")
    nutrient = lookup_report_nutrient(parts[1])
    if nutrient is None:
        return None, 0.0
    columns = parts[2].split(",")
    if len(columns) <= _PER_100G_COLUMN:
        raise FormatError(f"Nutrient line has no per 100g value: {line}")
    raw_value = columns[_PER_100G_COLUMN].strip()
    try:
        value = float(raw_value)
    except ValueError:
        raise FormatError(
            f"Non-numeric value {raw_value!r} ({columns[_UNIT_COLUMN]}) "
            f"for {parts[1]}"
        ) from None
    return nutrient, value


def label_from_filename(path: Path) -> tuple[str, FoodCategory] | None:
    """Return the name and category encoded as '<name>_<ordinal>' in a filename."""
    match = _LABELED_STEM.match(path.stem)
    if match is None:
        return None
    return match.group("name"), require_category(int(match.group("ordinal")))


def labeled_filename(name: str, category: FoodCategory) -> str:
    return f"{name}_{category.ordinal}{REPORT_SUFFIX}"


@dataclass
class CsvIngestor:
    """Normalizes raw reports and appends them to a store without duplicates."""

    store: FoodSink
    labeler: FoodLabeler | None = None
    renamer: FileRenamer = field(default_factory=PathRenamer)
    _present_ids: set[str] | None = field(default=None, init=False, repr=False)

    @property
    def present_ids(self) -> set[str]:
        """Source ids already stored, read from the store on first use."""
        if self._present_ids is None:
            self._present_ids = set(self.store.present_source_ids())
        return self._present_ids

    def refresh(self) -> None:
        """Rebuild the dedup index after the store changed out of band."""
        self._present_ids = set(self.store.present_source_ids())

    def ingest_report(self, path: Path) -> IngestResult:
        """Ingest one report file; raises FormatError if it is malformed."""
        present_ids = self.present_ids
        try:
            with path.open(encoding="utf-8") as handle:
                lines = iter(handle)
                source_id, raw_name = read_report_identity(lines)
                if source_id in present_ids:
                    _logger.info(
                        "Store already contains food %s:%s", source_id, raw_name
                    )
                    return IngestResult(
                        status=IngestStatus.DUPLICATE,
                        source_id=source_id,
                        name=raw_name,
                        path=path,
                    )
                values = parse_nutrient_rows(lines)
        except UnicodeDecodeError as exc:
            raise FormatError(f"{path.name} is not UTF-8 text: {exc}") from exc

        name, category = self._resolve_label(path, raw_name)
        food = FoodRecord.from_values(
            source_id=source_id, name=name, category=category, values=values
        )
        self.store.append(food)
        present_ids.add(food.source_id)
        _logger.info("%s added as %s (%s)", name, food.source_id, category.name)
        return IngestResult(
            status=IngestStatus.ADDED, source_id=food.source_id, name=name, path=path
        )

    def ingest_directory(self, directory: Path) -> BatchSummary:
        """Ingest every report under a directory, isolating per-file failures."""
        files = _walk_files(directory)
        # A corrupted store fails the whole batch, not each file.
        if self._present_ids is None:
            self.refresh()
        summary = BatchSummary()
        for path in files:
            if path.suffix.lower() != REPORT_SUFFIX:
                _logger.info("%s is not a .csv file", path.name)
                summary.skipped.append(path)
                continue
            try:
                result = self.ingest_report(path)
            except (FormatError, OSError) as exc:
                _logger.warning("Failed to ingest %s: %s", path, exc)
                summary.failed[path] = str(exc)
                continue
            if result.status is IngestStatus.ADDED:
                summary.added.append(result)
            else:
                summary.duplicates.append(result)
        _logger.info(
            "Ingested %s: added=%s duplicates=%s skipped=%s failed=%s",
            directory,
            len(summary.added),
            len(summary.duplicates),
            len(summary.skipped),
            len(summary.failed),
        )
        return summary

    def _resolve_label(self, path: Path, raw_name: str) -> tuple[str, FoodCategory]:
        encoded = label_from_filename(path)
        if encoded is not None:
            return encoded
        if self.labeler is None:
            raise FormatError(
                f"{path.name} does not encode a name and category and no labeler is set"
            )
        name, category = self.labeler.label(raw_name, path)
        target = path.with_name(labeled_filename(name, category))
        try:
            self.renamer.rename(path, target)
        except OSError as exc:
            _logger.warning("There was a problem renaming %s: %s", path.name, exc)
        else:
            _logger.info("Renamed %s to %s", path.name, target.name)
        return name, category


def _walk_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory {directory} does not exist")
    files = []
    for root, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        files.extend(Path(root) / name for name in sorted(filenames))
    return files
