"""
Scenario loading for JSON-defined or puzzle-text valve networks.

This module provides ScenarioLoader for turning scenario files into a
``Scenario``: a validated ``ValveNetworkState`` plus the run parameters
(start valve and time budgets). Two file formats are accepted:

- ``{name}.json``: structured scenario (preferred)
- ``{name}.txt``: raw puzzle records, parsed by ``flowsearch.parser``

Scenario file structure:
```json
{
  "name": "Sample Volcano",
  "description": "...",
  "start": "AA",
  "solo_minutes": 30,
  "duo_minutes": 26,
  "valves": {
    "AA": {"flow_rate": 0, "tunnels": ["DD", "II", "BB"]},
    ...
  }
}
```

Usage:
    loader = ScenarioLoader()
    scenario = loader.load("sample")
    network = scenario.network.to_network()
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .config import Config
from .network import ValveNetworkState, ValveState
from .parser import parse_network_text


class Scenario(BaseModel):
    """A valve network with the parameters to solve it."""

    name: str
    description: str = ""
    start: str = Field(default_factory=lambda: Config.START_VALVE)
    solo_minutes: int = Field(default_factory=lambda: Config.SOLO_MINUTES, ge=0)
    duo_minutes: int = Field(default_factory=lambda: Config.DUO_MINUTES, ge=0)
    network: ValveNetworkState


class ScenarioLoader:
    """Load and validate scenarios from a directory.

    Directory structure:
    - Default: Config.SCENARIOS_DIR ({PROJECT_ROOT}/examples/volcano/scenarios)
    - Override via constructor: ScenarioLoader(Path("/custom/scenarios"))
    - Scenario files: {scenario_name}.json, or {scenario_name}.txt as a fallback

    Validation:
    - Required JSON fields: name, valves
    - Field types and ranges are enforced by the pydantic models
      (e.g. a negative flow_rate raises ValidationError)
    - Dangling tunnels are left for ``ValveNetworkState.to_network`` to reject
    """

    def __init__(self, scenarios_dir: Optional[Path] = None):
        """Initialize scenario loader.

        Args:
            scenarios_dir: Directory containing scenario files.
                          Defaults to Config.SCENARIOS_DIR
        """
        self.scenarios_dir = scenarios_dir or Config.SCENARIOS_DIR

    def load(self, scenario_name: str) -> Scenario:
        """Load a scenario by name.

        Args:
            scenario_name: Name of scenario (without extension)

        Returns:
            Scenario with validated network and run parameters

        Raises:
            FileNotFoundError: If neither {name}.json nor {name}.txt exists
            ValueError: If scenario JSON is missing required fields
            MalformedInput: If a .txt scenario has an invalid record
            json.JSONDecodeError: If file contains invalid JSON
        """
        json_path = self.scenarios_dir / f"{scenario_name}.json"
        text_path = self.scenarios_dir / f"{scenario_name}.txt"

        if json_path.exists():
            data = json.loads(json_path.read_text())
            self._validate_scenario(data)
            return self._build_scenario(data)

        if text_path.exists():
            return Scenario(
                name=scenario_name,
                network=parse_network_text(text_path.read_text()),
            )

        raise FileNotFoundError(
            f"Scenario '{scenario_name}' not found at {json_path} or {text_path}"
        )

    def _validate_scenario(self, data: Dict) -> None:
        """Validate scenario data has required fields.

        Raises:
            ValueError: If required fields are missing
        """
        required = ["name", "valves"]
        missing = [field for field in required if field not in data]

        if missing:
            raise ValueError(f"Scenario missing required fields: {missing}")

        if not isinstance(data["valves"], dict) or not data["valves"]:
            raise ValueError("Scenario must define at least one valve")

    def _build_scenario(self, data: Dict[str, Any]) -> Scenario:
        fields: Dict[str, Any] = {
            "name": data["name"],
            "description": data.get("description", ""),
            "network": self._parse_valves(data["valves"]),
        }
        # Only pass optional parameters that are present so Config defaults apply.
        for key in ("start", "solo_minutes", "duo_minutes"):
            if key in data:
                fields[key] = data[key]
        return Scenario(**fields)

    def _parse_valves(self, raw: Dict[str, Any]) -> ValveNetworkState:
        """Accept both detailed and concise valve definitions.

        - Detailed: {"BB": {"flow_rate": 13, "tunnels": ["CC", "AA"]}}
        - Concise:  {"BB": [13, ["CC", "AA"]]}
        """
        valves: Dict[str, ValveState] = {}
        for key, value in raw.items():
            if isinstance(value, dict):
                valves[key] = ValveState(**value)
            elif isinstance(value, (list, tuple)) and len(value) == 2:
                valves[key] = ValveState(flow_rate=value[0], tunnels=list(value[1]))
            else:
                raise ValueError(f"Valve '{key}' must be an object or a [flow_rate, tunnels] pair")
        return ValveNetworkState(valves=valves)

    def list_scenarios(self) -> List[str]:
        """List all available scenario names (json and txt, deduplicated)."""
        if not self.scenarios_dir.exists():
            return []

        names = {
            f.stem
            for pattern in ("*.json", "*.txt")
            for f in self.scenarios_dir.glob(pattern)
            if not f.name.startswith("_")
        }
        return sorted(names)

    def get_scenario_info(self, scenario_name: str) -> Dict[str, Any]:
        """Get scenario metadata (name, description, valve counts)."""
        scenario = self.load(scenario_name)
        valves = scenario.network.valves

        return {
            "name": scenario.name,
            "description": scenario.description or "No description",
            "num_valves": len(valves),
            "num_productive_valves": sum(1 for v in valves.values() if v.flow_rate > 0),
            "start": scenario.start,
        }


def load_scenario(scenario_name: str) -> Scenario:
    """Convenience function to load a scenario from the default directory."""
    loader = ScenarioLoader()
    return loader.load(scenario_name)
