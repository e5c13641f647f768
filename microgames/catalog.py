from __future__ import annotations

import csv
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from microgames.errors import ConfigurationError

MIN_TIME_LIMIT = 1.0
MAX_TIME_LIMIT = 10.0
DEFAULT_TIME_LIMIT = 5.0
DEFAULT_COMMAND_TEXT = "Do something!"

CATALOG_HEADER = ["id", "scene_name", "command_text", "time_limit", "unlocked"]


def _slug_id(s: str) -> str:
    s = s.strip().casefold()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")


@dataclass(frozen=True, slots=True)
class MicrogameDescriptor:
    """Immutable metadata for one microgame.

    `scene_name` is the screen the loader presents for the round; `command_text`
    is the instruction shown on the command screen beforehand.
    """

    id: str
    scene_name: str
    command_text: str = DEFAULT_COMMAND_TEXT
    time_limit: float = DEFAULT_TIME_LIMIT
    unlocked: bool = True

    def __post_init__(self) -> None:
        if not self.scene_name.strip():
            raise ValueError("scene_name must not be blank")
        if not MIN_TIME_LIMIT <= self.time_limit <= MAX_TIME_LIMIT:
            raise ValueError(
                f"time_limit must be between {MIN_TIME_LIMIT:g} and {MAX_TIME_LIMIT:g} seconds (got {self.time_limit})"
            )


@dataclass(frozen=True, slots=True)
class Catalog:
    """Ordered, read-only list of microgames loaded once per session host."""

    microgames: tuple[MicrogameDescriptor, ...]
    _by_id: dict[str, MicrogameDescriptor]

    @staticmethod
    def from_descriptors(rows: list[MicrogameDescriptor] | tuple[MicrogameDescriptor, ...]) -> "Catalog":
        by_id: dict[str, MicrogameDescriptor] = {}
        for d in rows:
            if d.id in by_id:
                raise ConfigurationError(f"Duplicate microgame id: {d.id}")
            by_id[d.id] = d
        return Catalog(microgames=tuple(rows), _by_id=by_id)

    def get(self, id: str) -> MicrogameDescriptor | None:
        return self._by_id.get(id)

    def unlocked(self) -> tuple[MicrogameDescriptor, ...]:
        return tuple(d for d in self.microgames if d.unlocked)

    def __len__(self) -> int:
        return len(self.microgames)

    def __iter__(self) -> Iterator[MicrogameDescriptor]:
        return iter(self.microgames)

    def __getitem__(self, index: int) -> MicrogameDescriptor:
        return self.microgames[index]

    def __contains__(self, item: object) -> bool:
        return isinstance(item, str) and item in self._by_id


def _read_csv_rows(path: Path) -> list[list[str]]:
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            rows = [[c.strip() for c in row] for row in csv.reader(f)]
    except FileNotFoundError as e:
        raise ConfigurationError(f"Catalog file not found: {path}") from e

    return [row for row in rows if any(cell for cell in row)]


def _parse_bool(value: str, *, path: Path, line: int) -> bool:
    v = value.casefold()
    if v in {"", "1", "true", "yes", "y"}:
        return True
    if v in {"0", "false", "no", "n"}:
        return False
    raise ConfigurationError(f"{path}:{line}: invalid unlocked flag {value!r}")


def load_catalog_csv(path: Path) -> Catalog:
    rows = _read_csv_rows(path)
    if not rows:
        raise ConfigurationError(f"Empty catalog CSV: {path}")

    header = [c.casefold() for c in rows[0]]
    if header[:2] != CATALOG_HEADER[:2]:
        raise ConfigurationError(f"Unexpected header in {path}: {rows[0]}")

    out: list[MicrogameDescriptor] = []
    for line, row in enumerate(rows[1:], start=2):
        cells = row + [""] * (len(CATALOG_HEADER) - len(row))
        rid, scene_name, command_text, time_limit, unlocked = cells[: len(CATALOG_HEADER)]
        if not scene_name:
            raise ConfigurationError(f"{path}:{line}: scene_name is required")
        if not rid:
            rid = _slug_id(scene_name)

        try:
            limit = float(time_limit) if time_limit else DEFAULT_TIME_LIMIT
            descriptor = MicrogameDescriptor(
                id=rid,
                scene_name=scene_name,
                command_text=command_text or DEFAULT_COMMAND_TEXT,
                time_limit=limit,
                unlocked=_parse_bool(unlocked, path=path, line=line),
            )
        except ValueError as e:
            raise ConfigurationError(f"{path}:{line}: {e}") from e
        out.append(descriptor)

    if not out:
        raise ConfigurationError(f"Catalog has no microgames: {path}")

    return Catalog.from_descriptors(out)


def load_catalog(*, root: Path) -> Catalog:
    """Load `<root>/catalog/microgames.csv`."""

    return load_catalog_csv(root / "catalog" / "microgames.csv")
