#!/usr/bin/env python3
"""Load neighborhood reference polygons into the database.

Accepts either a GeoJSON FeatureCollection (name taken from
``properties.name`` or ``properties.ntaname``) or a JSON-lines export with one
``{"name": ..., "geometry": {"coordinates": ...}}`` document per line. Only
the coordinates are stored; the geometry type is dropped.

Usage: python scripts/load_neighborhoods.py neighborhoods.json
(or set NEIGHBORHOODS_FILE)
"""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from restaurant_api.database import get_session_factory
from restaurant_api.repositories import neighborhood as neighborhood_repo
from restaurant_api.schemas import NeighborhoodCreate, NeighborhoodGeometry

logger = logging.getLogger(__name__)


def _feature_record(feature: dict) -> dict:
    props = feature.get("properties") or {}
    return {
        "name": props.get("name") or props.get("ntaname"),
        "geometry": feature.get("geometry") or {},
    }


def parse_neighborhoods(text: str) -> list[NeighborhoodCreate]:
    """Parse a FeatureCollection or JSON-lines document into create models."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        # More than one document: JSON-lines
        document = [json.loads(line) for line in text.splitlines() if line.strip()]

    if isinstance(document, dict) and document.get("type") == "FeatureCollection":
        records = [_feature_record(feature) for feature in document.get("features", [])]
    elif isinstance(document, dict):
        records = [document]
    else:
        records = document

    neighborhoods = []
    for record in records:
        geometry = record.get("geometry") or {}
        if not record.get("name") or geometry.get("type", "Polygon") != "Polygon":
            logger.warning("Skipping record without a name or with non-Polygon geometry")
            continue
        neighborhoods.append(
            NeighborhoodCreate(
                name=record["name"],
                geometry=NeighborhoodGeometry(coordinates=geometry.get("coordinates", [])),
            )
        )
    return neighborhoods


async def load(path: Path) -> int:
    neighborhoods = parse_neighborhoods(path.read_text(encoding="utf-8"))
    session_factory = get_session_factory()
    async with session_factory() as session:
        created = await neighborhood_repo.create_neighborhoods_bulk(session, neighborhoods)
    return len(created)


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("NEIGHBORHOODS_FILE", "")
    if not path:
        print("Usage: load_neighborhoods.py <file> (or set NEIGHBORHOODS_FILE)")
        return

    count = asyncio.run(load(Path(path)))
    print(f"✓ Loaded {count} neighborhoods")


if __name__ == "__main__":
    main()
