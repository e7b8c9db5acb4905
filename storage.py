"""IO helpers for loading locations/regions and exporting match results."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Mapping, Sequence, Union

import pandas as pd

from geom import Coordinate, Polygon
from region import Location, MatchResult, Region
from validation import (
    ClosurePolicy,
    ValidationError,
    validate_locations,
    validate_regions,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
FileLike = Union[IO[str], IO[bytes]]

LOCATION_COLUMNS = ("name", "longitude", "latitude")


def _read_json(path_or_file: Union[PathLike, FileLike], label: str) -> Any:
    """Decode a JSON document from a path or an open file object."""

    try:
        if isinstance(path_or_file, (str, Path)):
            path = Path(path_or_file)
            if not path.exists():
                raise FileNotFoundError(f"{label} file not found: {path}")
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        return json.load(path_or_file)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError(f"{label} JSON is invalid: {exc}") from exc


def _parse_coordinate(value: Any, context: str) -> Coordinate:
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{context} has invalid coordinates.")
    # JSON strings and booleans are not numbers even though float() takes them.
    if any(isinstance(part, bool) or not isinstance(part, (int, float)) for part in value):
        raise ValidationError(f"{context} has non-numeric coordinates: {value!r}.")
    try:
        return Coordinate.from_pair(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{context} has invalid coordinates: {value!r}.") from exc


def _expect_records(data: Any, label: str) -> List[Mapping[str, Any]]:
    if not isinstance(data, list):
        raise ValidationError(f"{label} JSON must be a list of objects.")
    for record in data:
        if not isinstance(record, dict):
            raise ValidationError(f"{label} JSON is invalid: expected objects, got {record!r}.")
    return data


def parse_locations(data: Any) -> List[Location]:
    """Convert decoded JSON records into Location objects."""

    locations = []
    for record in _expect_records(data, "Locations"):
        name = record.get("name")
        coordinate = _parse_coordinate(record.get("coordinates"), f"Location '{name}'")
        locations.append(Location(name, coordinate))
    return locations


def parse_regions(data: Any) -> List[Region]:
    """Convert decoded JSON records into Region objects."""

    regions = []
    for record in _expect_records(data, "Regions"):
        name = record.get("name")
        raw_polygons = record.get("coordinates")
        if not isinstance(raw_polygons, list):
            raise ValidationError(f"Region '{name}' has no polygons.")

        polygons = []
        for raw_polygon in raw_polygons:
            if not isinstance(raw_polygon, list):
                raise ValidationError(f"Region '{name}' has invalid polygon: {raw_polygon!r}.")
            polygons.append(
                Polygon(
                    [_parse_coordinate(point, f"Region '{name}' polygon") for point in raw_polygon]
                )
            )
        regions.append(Region(name, polygons))
    return regions


def load_locations(path_or_file: Union[PathLike, FileLike]) -> List[Location]:
    """Read, parse, and validate a locations JSON document."""

    locations = validate_locations(parse_locations(_read_json(path_or_file, "Locations")))
    logger.info("Loaded %d locations", len(locations))
    return locations


def load_regions(
    path_or_file: Union[PathLike, FileLike],
    closure: ClosurePolicy = ClosurePolicy.ERROR,
) -> List[Region]:
    """Read, parse, and validate a regions JSON document."""

    regions = validate_regions(parse_regions(_read_json(path_or_file, "Regions")), closure)
    logger.info("Loaded %d regions", len(regions))
    return regions


def read_csv(path_or_file: Union[PathLike, FileLike]) -> pd.DataFrame:
    """Load a CSV into a DataFrame and raise a ValidationError on failure."""

    try:
        df = pd.read_csv(path_or_file)
    except FileNotFoundError as exc:
        raise FileNotFoundError("CSV file not found.") from exc
    except Exception as exc:  # pragma: no cover - pandas composes different errors
        raise ValidationError(f"Failed to read CSV: {exc}") from exc

    if df.empty:
        raise ValidationError("CSV is empty. Add location records before importing.")
    return df


def locations_from_frame(df: pd.DataFrame, mapping: Mapping[str, str]) -> List[Location]:
    """Build validated locations from a DataFrame and a target -> source column mapping."""

    normalized = normalize_columns(df, mapping)
    locations = [
        Location(str(row.name), Coordinate(float(row.longitude), float(row.latitude)))
        for row in normalized.itertuples(index=False)
    ]
    return validate_locations(locations)


def read_locations_csv(
    path_or_file: Union[PathLike, FileLike], mapping: Mapping[str, str]
) -> List[Location]:
    """Load locations from a CSV using a target -> source column mapping."""

    return locations_from_frame(read_csv(path_or_file), mapping)


def normalize_columns(df: pd.DataFrame, mapping: Mapping[str, str]) -> pd.DataFrame:
    """Rename and validate the location columns based on the provided mapping."""

    missing_targets = set(LOCATION_COLUMNS).difference(mapping.keys())
    if missing_targets:
        raise ValidationError(f"Missing mappings for: {', '.join(sorted(missing_targets))}.")

    rename_map: Dict[str, str] = {}
    for target in LOCATION_COLUMNS:
        source = mapping[target]
        if source not in df.columns:
            raise ValidationError(f"Source column '{source}' not found in the imported data.")
        if source in rename_map:
            raise ValidationError(
                f"Source column '{source}' is mapped to both '{rename_map[source]}' and '{target}'."
            )
        rename_map[source] = target

    normalized = df.rename(columns=rename_map)[list(LOCATION_COLUMNS)].copy()

    for coordinate in ("longitude", "latitude"):
        normalized[coordinate] = pd.to_numeric(normalized[coordinate], errors="coerce")
        if normalized[coordinate].isna().any():
            raise ValidationError(
                f"Column '{coordinate}' contains non-numeric values after conversion."
            )

    if normalized["name"].isna().any():
        raise ValidationError("Column 'name' contains empty values.")
    return normalized


def write_csv(df: pd.DataFrame) -> bytes:
    """Serialise the DataFrame into UTF-8 encoded CSV bytes."""

    return df.to_csv(index=False).encode("utf-8")


def results_to_records(results: Iterable[MatchResult]) -> List[Dict[str, Any]]:
    return [result.to_dict() for result in results]


def results_to_json(results: Iterable[MatchResult]) -> bytes:
    """Serialise match results into indented UTF-8 encoded JSON bytes."""

    return json.dumps(results_to_records(results), indent=2, ensure_ascii=False).encode("utf-8")


def write_results(results: Sequence[MatchResult], path: PathLike) -> Path:
    """Write match results as JSON to ``path`` and return the path."""

    target = Path(path)
    target.write_bytes(results_to_json(results))
    logger.info("Wrote %d region results to %s", len(results), target)
    return target


def results_to_frame(results: Iterable[MatchResult]) -> pd.DataFrame:
    """Summarise results as one row per region, keeping region order."""

    rows = [
        {
            "region": result.region,
            "matches": len(result.matched_locations),
            "locations": ", ".join(result.matched_locations),
        }
        for result in results
    ]
    return pd.DataFrame(rows, columns=["region", "matches", "locations"])


def membership_frame(results: Iterable[MatchResult]) -> pd.DataFrame:
    """Flatten results into one row per (region, location) pair."""

    rows = [
        {"region": result.region, "location": name}
        for result in results
        for name in result.matched_locations
    ]
    return pd.DataFrame(rows, columns=["region", "location"])
