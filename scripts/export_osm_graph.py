# scripts/export_osm_graph.py
import argparse
import json
from pathlib import Path

from route_engine.core.config import settings
from route_engine.services.osm_export import download_graph, save_graph


def main() -> None:
    parser = argparse.ArgumentParser(description="Export a drivable OSM road graph as routing dataset JSON.")
    parser.add_argument(
        "--place",
        default=settings.OSM_PLACE,
        help="Place name understood by the OSM geocoder, e.g. 'London, United Kingdom'.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(settings.GRAPH_PATH),
        help="Output graph JSON path.",
    )
    parser.add_argument("--network-type", default="drive")
    args = parser.parse_args()

    graph = download_graph(args.place, network_type=args.network_type)
    save_graph(graph, args.output)
    report = {
        "place": args.place,
        "output": str(args.output),
        "node_count": graph.node_count,
        "edge_count": graph.edge_count,
    }
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
