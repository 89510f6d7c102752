# scripts/floormap_analyze.py
"""CLI for batch elevation analysis of floor plan JSON files."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from tqdm import tqdm

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from floormap.models import FloorPlan
from floormap.segmentation import analyze_room_directions, analyze_room_segments

logger = logging.getLogger("floormap.analyze")

ANALYZERS = {
    "segments": analyze_room_segments,
    "directions": analyze_room_directions,
}


def analyze_plan(plan: FloorPlan, mode: str) -> dict:
    analyze = ANALYZERS[mode]
    rooms = []
    for room in tqdm(plan.rooms(), desc=f"Rooms in {plan.plan_id or 'plan'}", leave=False):
        results = analyze(room, plan.shapes, plan.units_per_mm)
        rooms.append({
            "room_id": room.id,
            "name": room.name,
            "results": [r.model_dump(mode="json", by_alias=True) for r in results],
        })
    return {"plan_id": plan.plan_id, "mode": mode, "rooms": rooms}


@click.command()
@click.option("--input-dir", type=click.Path(exists=True), required=True)
@click.option("--output-dir", type=click.Path(), required=True)
@click.option("--mode", type=click.Choice(sorted(ANALYZERS)), default="segments")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
)
def cli(input_dir, output_dir, mode, log_level):
    """Analyse every room of each floor plan for elevation views."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    inp = Path(input_dir)
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    json_files = sorted(inp.glob("*.json"))
    if not json_files:
        click.echo("No JSON files found.")
        return

    written = 0
    for jf in tqdm(json_files, desc="Analyzing"):
        try:
            plan = FloorPlan.model_validate_json(jf.read_text())
        except (OSError, ValidationError) as e:
            logger.warning("Skipping %s: %s", jf.name, e)
            continue
        result = analyze_plan(plan, mode)
        (out / f"{jf.stem}_elevations.json").write_text(json.dumps(result, indent=2))
        written += 1

    click.echo(f"Analyzed {written} plans into {out}")


if __name__ == "__main__":
    cli()
