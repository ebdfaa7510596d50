"""
EcoCity Planner CLI

Builds a city from --place arguments (or a small demo layout), refreshes
its metrics with current weather and prints an ASCII map with the report.
"""

import asyncio
import logging

from core.models import Category
from core.planner import CityPlanner, MetricsReport, create_planner
from core.scoring import explain_score
from core.settings import PlannerSettings

DEMO_LAYOUT = [
    ("road", 0, 5, 0),
    ("road", 1, 5, 0),
    ("road", 2, 5, 0),
    ("residential-house", 1, 2, 0),
    ("apartment-building", 4, 1, 0),
    ("park", 1, 7, 0),
    ("school", 5, 7, 0),
    ("solar-farm", 12, 2, 0),
    ("factory", 14, 12, 0),
]

MAP_SYMBOLS = {
    Category.RESIDENTIAL: "R",
    Category.COMMERCIAL: "C",
    Category.INDUSTRIAL: "I",
    Category.GREENSPACE: "G",
    Category.INFRASTRUCTURE: "=",
    Category.EDUCATIONAL: "E",
    Category.HEALTHCARE: "H",
    Category.ENTERTAINMENT: "*",
    Category.AGRICULTURAL: "A",
}


def parse_placement(text: str):
    """Parse 'building-id:x:y[:rotation]'."""
    parts = text.split(":")
    if len(parts) not in (3, 4):
        raise ValueError(f"Expected id:x:y[:rotation], got '{text}'")
    rotation = int(parts[3]) if len(parts) == 4 else 0
    return parts[0], int(parts[1]), int(parts[2]), rotation


def render_map(planner: CityPlanner) -> str:
    lines = []
    for row in planner.grid.grid:
        line_str = ""
        for cell in row:
            instance = planner.grid.building_at(cell.x, cell.y)
            char = MAP_SYMBOLS[instance.category] if instance else "."
            line_str += f" {char}"
        lines.append(line_str)
    return "\n".join(lines)


def print_report(report: MetricsReport) -> None:
    print("\n=== METRICS ===")
    for name, value in report.metrics.to_dict().items():
        print(f"  {name:<11} {value}")
    print(f"\nScore: {report.score}/100 ({report.rating})")

    print("\n=== TIPS ===")
    for tip in report.tips:
        print(f"  - {tip}")

    print("\n=== OUTLOOK ===")
    for prediction in report.predictions:
        print(f"  [{prediction.timeframe}] {prediction.description} ({prediction.impact})")


def main():
    """CLI interface for the planner."""
    import argparse

    parser = argparse.ArgumentParser(description="EcoCity sustainable city planner")
    parser.add_argument("--place", action="append", default=[], metavar="ID:X:Y[:ROT]",
                        help="Place a building (repeatable). Uses a demo layout when omitted")
    parser.add_argument("--mock", action="store_true", help="Use the offline weather reading")
    parser.add_argument("--explain", action="store_true", help="Show the score breakdown")
    parser.add_argument("--csv", help="Write the building layout to this CSV file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s │ %(name)-20s │ %(levelname)-8s │ %(message)s',
        datefmt='%H:%M:%S',
    )

    settings = PlannerSettings.from_env()
    if args.mock:
        settings.weather_mock = True
    planner = create_planner(settings)

    try:
        placements = [parse_placement(p) for p in args.place] if args.place else DEMO_LAYOUT
    except ValueError as e:
        parser.error(f"--place: {e}")
    for building_id, x, y, rotation in placements:
        outcome = planner.place(building_id, x, y, rotation)
        status = "OK" if outcome.success else "REJECTED"
        print(f"[{status}] {outcome.message}")

    report = asyncio.run(planner.refresh())

    print("\n=== CITY MAP ===")
    print("Legend: R res  C com  I ind  G green  = infra  E edu  H health  * ent  A agri\n")
    print(render_map(planner))
    print_report(report)

    risk = planner.disaster_risk()
    print(f"\nDisaster risk: flood {risk.flood}%  heatwave {risk.heatwave}%  "
          f"storm {risk.storm}%  overall {risk.overall}%")

    if args.explain:
        print()
        print(explain_score(report.metrics))

    if args.csv:
        from core.export import layout_frame
        layout_frame(planner.grid).to_csv(args.csv, index=False)
        print(f"\nLayout written to {args.csv}")


if __name__ == "__main__":
    main()
