"""
Rendering of particle positions as an animated GIF.
"""

import io
import logging
from pathlib import Path
from typing import List, Tuple, Union

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from PIL import Image

from .models.errors import ConfigurationError
from .optimization.particle_swarm import Swarm

logger = logging.getLogger(__name__)


class SwarmPlotter:
    """Collects one frame per iteration and writes them out as a GIF.

    Only the first two coordinates of each particle are drawn.
    """

    def __init__(
        self,
        bounds: Tuple[float, float] = (-5.0, 5.0),
        size: Tuple[int, int] = (600, 600),
        dpi: int = 100,
    ):
        self.bounds = bounds
        self.size = size
        self.dpi = dpi
        self.frames: List[Image.Image] = []

    def render(self, swarm: Swarm, iteration: int) -> Image.Image:
        """Draw the swarm and return the frame as an image."""
        if swarm.dimensions < 2:
            raise ConfigurationError(
                f"Cannot plot a swarm with {swarm.dimensions} dimension(s)"
            )

        fig = Figure(figsize=(self.size[0] / self.dpi, self.size[1] / self.dpi), dpi=self.dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111)

        xs = [p.position[0] for p in swarm.particles]
        ys = [p.position[1] for p in swarm.particles]
        ax.scatter(xs, ys, s=25, c="blue")

        ax.set_xlim(*self.bounds)
        ax.set_ylim(*self.bounds)
        ax.grid(True, alpha=0.3)
        ax.set_title(f"PSO (iter = {iteration})")

        buffer = io.BytesIO()
        fig.savefig(buffer, format="png", facecolor="white")
        buffer.seek(0)
        return Image.open(buffer).convert("RGB")

    def add_frame(self, swarm: Swarm, iteration: int) -> None:
        self.frames.append(self.render(swarm, iteration))

    def save(self, path: Union[str, Path], frame_duration: int = 250) -> Path:
        """Write the collected frames as a looping GIF."""
        if not self.frames:
            raise ValueError("No frames to save")

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        first, *rest = self.frames
        first.save(
            path,
            format="GIF",
            save_all=True,
            append_images=rest,
            duration=frame_duration,
            loop=0,
        )
        logger.info(f"Saved {len(self.frames)} frames to {path}")
        return path
