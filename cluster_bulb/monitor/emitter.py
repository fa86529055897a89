"""Maps the cluster state to light colors, one command per tick."""

import logging
from dataclasses import dataclass

from ..home_assistant.client import LightClient, LightError
from ..models import BLUE, GREEN, RED, ClusterState, Color

logger = logging.getLogger(__name__)

STATE_COLORS = {
    ClusterState.HEALTHY: GREEN,
    ClusterState.PULL_REQUESTS_OPEN: BLUE,
    ClusterState.ISSUES_DETECTED: RED,
}


@dataclass
class ColorOutputState:
    """Last color emitted. Owned by the emitter alone."""

    last_color: Color = GREEN


class ColorEmitter:
    """Emits one color per tick, alternating red and blue in the BOTH state.

    Because the emitter owns the alternation, the blink rate is the tick
    rate.
    """

    def __init__(self, light: LightClient | None = None):
        self.light = light
        self.output = ColorOutputState()

    def next_color(self, cluster_state: ClusterState) -> Color:
        if cluster_state is ClusterState.BOTH:
            return BLUE if self.output.last_color == RED else RED
        return STATE_COLORS[cluster_state]

    def tick(self, cluster_state: ClusterState) -> Color:
        """Advance one tick and send the resulting color to the light.

        Returns:
            The color emitted for this tick
        """
        color = self.next_color(cluster_state)
        self.output.last_color = color

        if self.light is None or not self.light.is_configured():
            return color
        try:
            self.light.set_color(color)
        except LightError as e:
            logger.error("Error updating light: %s", e)
        return color
