"""
Command-line entry point: distances, layer cakes and GeoJSON normalization.
"""
import argparse
import json
import logging
import sys

from geodraw.ingestion import dump_geojson, load_circles_csv, load_geojson
from geodraw.models import config
from geodraw.models.cake import bake_layer_cake
from geodraw.utils.geojson import (
    bbox_of_feature_collection,
    expand_multi_geometries,
    merge_polygons_from_collection,
)
from geodraw.utils.rings import GeoPoint
from geodraw.utils.ruler import MEASUREMENT_SYSTEMS, measure

log = logging.getLogger(__name__)


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="geodraw", description="Geodesic and GeoJSON geometry tools")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("distance", help="Ellipsoidal distance and initial bearing")
    for name in ("lat1", "lon1", "lat2", "lon2"):
        p.add_argument(name, type=float)
    p.add_argument("--units", choices=MEASUREMENT_SYSTEMS, default=config.MEASUREMENT_SYSTEM)

    p = sub.add_parser("cake", help="Bake concentric circles from a CSV into donut polygons")
    p.add_argument("--circles", required=True, help="CSV with lat, lng, radius columns")
    p.add_argument("--steps", type=int, default=config.CAKE_STEPS)
    p.add_argument("--output", default=None)

    p = sub.add_parser("bbox", help="Bounding box of a GeoJSON file or URL")
    p.add_argument("input")

    for name, help_text in (("expand", "Split Multi* geometries into single features"),
                            ("merge", "Merge polygon features into one feature")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("input")
        p.add_argument("--output", default=None)

    return parser.parse_args(argv)


def _emit(data, output=None) -> None:
    if output:
        dump_geojson(data, output)
    else:
        print(json.dumps(data))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    log.debug("Running %s with args: %s", args.command, args)

    try:
        if args.command == "distance":
            result = measure(GeoPoint(args.lat1, args.lon1), GeoPoint(args.lat2, args.lon2), args.units)
            _emit(result)
        elif args.command == "cake":
            circles = load_circles_csv(args.circles)
            _emit(bake_layer_cake(circles, args.steps), args.output)
        elif args.command == "bbox":
            _emit(bbox_of_feature_collection(load_geojson(args.input)))
        elif args.command == "expand":
            _emit(expand_multi_geometries(load_geojson(args.input)), args.output)
        elif args.command == "merge":
            merged = merge_polygons_from_collection(load_geojson(args.input))
            _emit({"type": "FeatureCollection", "features": [merged] if merged else []}, args.output)
    except (ValueError, RuntimeError) as exc:
        log.error("%s failed: %s", args.command, exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
