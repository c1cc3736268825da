"""Visualization and export for the ecosystem simulation."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from matplotlib.patches import Patch
from pathlib import Path
from typing import List, Sequence, TYPE_CHECKING
from PIL import Image
import io

if TYPE_CHECKING:
    from ..model.species import SpeciesProfile
    from ..model.state import SimulationState


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation

    Cells are coloured by the species occupying them; the colour of each
    species comes from its profile.
    """

    EMPTY_COLOR = '#ECF0F1'    # Light gray
    UNKNOWN_COLOR = '#95A5A6'  # Gray

    def __init__(self, depth: int, width: int,
                 species: Sequence["SpeciesProfile"]):
        self.depth = depth
        self.width = width
        self.species = list(species)
        self.frames: List[Image.Image] = []

        # Index i + 1 matches the species codes in SimulationState.species_grid
        self._palette = np.array(
            [to_rgb(self.EMPTY_COLOR)] +
            [to_rgb(p.color) for p in self.species] +
            [to_rgb(self.UNKNOWN_COLOR)]
        )

    def render_grid(self, species_grid: np.ndarray) -> np.ndarray:
        """Convert species codes into an RGB image array."""
        codes = species_grid.astype(np.int64)
        # -1 (unknown species) maps to the last palette entry
        codes = np.where(codes < 0, len(self._palette) - 1, codes)
        return self._palette[codes]

    def _create_figure(self, state: "SimulationState") -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        aspect = self.width / self.depth
        fig_height = 6
        fig_width = max(7, fig_height * aspect + 2)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        ax.imshow(self.render_grid(state.species_grid), origin='upper',
                  aspect='equal', interpolation='nearest',
                  extent=[-0.5, self.width - 0.5, self.depth - 0.5, -0.5])

        counts = ', '.join(f"{name}: {count}"
                           for name, count in state.populations.items())
        ax.set_title(f'Step {state.step} | {counts}', fontsize=9)
        ax.set_xlabel('Column')
        ax.set_ylabel('Row')

        legend_elements = [
            Patch(facecolor=p.color, edgecolor='black', label=p.name.capitalize())
            for p in self.species
        ]
        ax.legend(handles=legend_elements, loc='upper left',
                  bbox_to_anchor=(1.01, 1.0), fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "SimulationState") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "SimulationState", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
