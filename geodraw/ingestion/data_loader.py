"""
Data ingestion for the geometry core.
Loads GeoJSON from text, files or URLs, and layer-cake circles from CSV.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
import requests

from ..models import config
from ..models.cake import Circle

logger = logging.getLogger(__name__)

# --- column aliases ----------------------------------------------------------
CIRCLE_COLUMN_ALIASES = {
    "latitude": "lat",
    "lon": "lng",
    "longitude": "lng",
    "radius_m": "radius",
    "radius_meters": "radius",
}


def as_feature_collection(data: Any) -> Dict[str, Any]:
    """
    Coerce parsed GeoJSON into a FeatureCollection: a bare Feature is
    wrapped, a bare geometry becomes a Feature with empty properties.

    Raises:
        ValueError: if ``data`` is not GeoJSON at all
    """
    if not isinstance(data, dict):
        raise ValueError(f"GeoJSON must be an object, got {type(data).__name__}")
    gtype = data.get("type")
    if gtype == "FeatureCollection":
        if not isinstance(data.get("features"), list):
            raise ValueError("FeatureCollection has no 'features' list")
        return data
    if gtype == "Feature":
        return {"type": "FeatureCollection", "features": [data]}
    if gtype in ("Point", "MultiPoint", "LineString", "MultiLineString",
                 "Polygon", "MultiPolygon", "GeometryCollection"):
        feature = {"type": "Feature", "properties": {}, "geometry": data}
        return {"type": "FeatureCollection", "features": [feature]}
    raise ValueError(f"Unsupported GeoJSON type: {gtype!r}")


def load_geojson_text(text: str) -> Dict[str, Any]:
    """Parse GeoJSON text into a FeatureCollection."""
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValueError("Failed to parse GeoJSON text") from e
    fc = as_feature_collection(data)
    logger.debug(f"Parsed {len(fc['features'])} features from {len(text)} characters")
    return fc


def load_geojson_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a GeoJSON file into a FeatureCollection."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise RuntimeError(f"Failed to read GeoJSON file {path}: {e}") from e
    fc = load_geojson_text(text)
    logger.info(f"Loaded {len(fc['features'])} features from {path}")
    return fc


def fetch_geojson(url: str, timeout: Optional[float] = None) -> Dict[str, Any]:
    """
    Fetch GeoJSON from an HTTP endpoint.

    Raises:
        RuntimeError: on connection failure or a non-200 response
        ValueError: if the body is not GeoJSON
    """
    try:
        response = requests.get(
            url,
            headers={"Accept": "application/json"},
            timeout=timeout if timeout is not None else config.HTTP_TIMEOUT,
        )
    except requests.RequestException as e:
        raise RuntimeError(f"Failed to fetch GeoJSON from {url}: {e}") from e

    if response.status_code != 200:
        raise RuntimeError(
            f"Failed to fetch GeoJSON from {url}: {response.status_code} {response.reason}"
        )
    try:
        data = response.json()
    except ValueError as e:
        raise ValueError(f"Response from {url} is not valid JSON") from e

    fc = as_feature_collection(data)
    logger.info(f"Fetched {len(fc['features'])} features from {url}")
    return fc


def load_geojson(source: Union[str, Path]) -> Dict[str, Any]:
    """Load GeoJSON from an http(s) URL or a local path."""
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return fetch_geojson(source)
    return load_geojson_file(source)


def dump_geojson(fc: Dict[str, Any], path: Union[str, Path, None] = None) -> str:
    """Serialize ``fc``; also write it to ``path`` when given."""
    text = json.dumps(fc)
    if path is not None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        Path(path).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {len(fc.get('features', []))} features to {path}")
    return text


def load_circles_csv(csv_path: Union[str, Path]) -> List[Circle]:
    """
    Load layer-cake circles from a CSV file.

    Expected columns (aliases in brackets):
    - 'lat' [latitude]
    - 'lng' [lon, longitude]
    - 'radius' meters [radius_m, radius_meters]
    Rows with missing or non-numeric values are logged and skipped.
    """
    try:
        df = pd.read_csv(csv_path)
    except Exception as e:
        raise RuntimeError(f"Failed to read CSV file {csv_path}: {e}") from e

    renames = {}
    for alias, column in CIRCLE_COLUMN_ALIASES.items():
        if alias in df.columns and column not in df.columns and column not in renames.values():
            renames[alias] = column
    df = df.rename(columns=renames)
    missing = [col for col in ("lat", "lng", "radius") if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    circles = []
    for i, record in enumerate(df[["lat", "lng", "radius"]].to_dict("records")):
        if any(pd.isna(v) for v in record.values()):
            logger.warning(f"Skipping row {i} with missing values: {record}")
            continue
        try:
            circles.append(Circle.from_record(record))
        except ValueError as e:
            logger.warning(f"Skipping row {i}: {e}")

    logger.info(f"Loaded {len(circles)} circles from {csv_path}")
    return circles
