"""Export JSON schemas for Stop, Itinerary and Place."""

import json
from pathlib import Path

from atlantico.app.models import Itinerary, Place, Stop


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in (Stop, Itinerary, Place):
        schema_path = schemas_dir / f"{model.__name__}.schema.json"
        with open(schema_path, "w", encoding="utf-8") as f:
            json.dump(model.model_json_schema(), f, indent=2, ensure_ascii=False)
        print(f"Exported {model.__name__} schema to {schema_path}")


if __name__ == "__main__":
    main()
