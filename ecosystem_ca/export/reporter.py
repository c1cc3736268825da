"""Summary report generation for the ecosystem simulation."""

from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import SimulationState


class Reporter:
    """Tracks population history and produces a formatted text report."""

    def __init__(self, config_path: Optional[str], seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.population_history: List[Dict[str, int]] = []
        self.peak_populations: Dict[str, int] = {}
        self.peak_steps: Dict[str, int] = {}
        self.extinction_steps: Dict[str, int] = {}

    def update(self, state: "SimulationState") -> None:
        """Accumulate population figures for one tick."""
        self.population_history.append(dict(state.populations))

        for species, count in state.populations.items():
            if count > self.peak_populations.get(species, -1):
                self.peak_populations[species] = count
                self.peak_steps[species] = state.step

            # First tick a species that had members hits zero
            if count == 0 and species not in self.extinction_steps \
                    and self.peak_populations.get(species, 0) > 0:
                self.extinction_steps[species] = state.step

    def generate_summary(self, final_state: "SimulationState",
                         summary: Dict,
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        metrics = final_state.metrics

        lines = [
            "",
            "=" * 80,
            "                    ECOSYSTEM SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(built-in defaults)'}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Total Steps:           {final_state.step}",
            f"Final Population:      {int(metrics.get('total_population', 0))}",
            f"Field Occupancy:       {metrics.get('occupancy', 0):.4f}",
            f"Total Births:          {int(metrics.get('births', 0))}",
            f"Total Deaths:          {int(metrics.get('deaths', 0))}",
            f"Still Viable:          {'yes' if summary.get('viable') else 'no'}",
            "",
            "POPULATIONS",
            "-" * 40,
        ]

        for species, count in final_state.populations.items():
            peak = self.peak_populations.get(species, count)
            peak_step = self.peak_steps.get(species, final_state.step)
            line = (f"{species.capitalize():<10} final {count:>5}   "
                    f"peak {peak:>5} (step {peak_step})")
            if species in self.extinction_steps:
                line += f"   extinct at step {self.extinction_steps[species]}"
            lines.append(line)

        lines += [
            "",
            "DEATHS BY CAUSE",
            "-" * 40,
        ]
        for species, causes in summary.get('deaths', {}).items():
            if not causes:
                continue
            detail = ', '.join(f"{cause}: {n}" for cause, n in sorted(causes.items()))
            lines.append(f"{species.capitalize():<10} {detail}")

        lines += [
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'population_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
