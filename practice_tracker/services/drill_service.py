"""
Drill configuration service for the Practice Efficiency Tracker.

Handles generation of the drill sequence and per-drill setup: tags,
enabled actions and action ordering. Commands that reference an unknown
drill or action are ignored and reported with a ``False`` return value.
"""
import logging
from typing import Iterable, List, Optional

from ..models import ActionButton, Drill, Session, create_drills

logger = logging.getLogger(__name__)


class DrillService:
    """Service for creating and configuring the drills of a session."""

    def __init__(self, session: Session):
        self.session = session

    def create_drills(self, drills_number: int) -> List[Drill]:
        """
        Replace the whole drill sequence with ``drills_number`` fresh drills.

        Any committed timer, counter or waste data is discarded; there is no
        merge by drill id.
        """
        had_data = any(
            drill.timer_data or drill.counter_data or drill.waste_time
            for drill in self.session.drills
        )
        if had_data:
            logger.warning(
                "Regenerating %d drills discards tracked data of %d existing drills",
                max(0, drills_number), len(self.session.drills),
            )
        self.session.drills = create_drills(drills_number)
        self.session.ensure_valid_index()
        logger.info("Created %d drills", len(self.session.drills))
        return self.session.drills

    def get_drill(self, drill_index: int) -> Optional[Drill]:
        if self.session.has_drill(drill_index):
            return self.session.drills[drill_index]
        return None

    def update_drill_tags(self, drill_index: int, tags: Iterable[str]) -> bool:
        """Replace the tags of a drill; a bare string counts as a single tag."""

        drill = self._drill_or_log(drill_index, "update tags")
        if drill is None:
            return False
        if isinstance(tags, str):
            tags = [tags]
        drill.tags = {str(tag) for tag in (tags or [])}
        return True

    def toggle_action_button(self, drill_index: int, action_id: str) -> bool:
        action = self._action_or_log(drill_index, action_id, "toggle")
        if action is None:
            return False
        action.enabled = not action.enabled
        return True

    def set_action_enabled(self, drill_index: int, action_id: str, enabled: bool) -> bool:
        action = self._action_or_log(drill_index, action_id, "enable")
        if action is None:
            return False
        action.enabled = bool(enabled)
        return True

    def reorder_action_buttons(self, drill_index: int, from_pos: int, to_pos: int) -> bool:
        """Move one action to a new position, keeping all other relative orderings."""

        drill = self._drill_or_log(drill_index, "reorder actions")
        if drill is None:
            return False
        size = len(drill.action_buttons)
        if not (0 <= from_pos < size and 0 <= to_pos < size):
            logger.debug("Ignoring reorder %s -> %s outside 0..%d", from_pos, to_pos, size - 1)
            return False
        if from_pos == to_pos:
            return True
        buttons = list(drill.action_buttons)
        moved = buttons.pop(from_pos)
        buttons.insert(to_pos, moved)
        drill.action_buttons = buttons
        return True

    def move_action_button(self, drill_index: int, action_id: str, over_action_id: str) -> bool:
        """Drag-and-drop style reorder: move ``action_id`` onto the slot of ``over_action_id``."""

        drill = self._drill_or_log(drill_index, "move action")
        if drill is None:
            return False
        from_pos = drill.action_position(action_id)
        to_pos = drill.action_position(over_action_id)
        if from_pos < 0 or to_pos < 0:
            logger.debug("Ignoring move of %r over %r", action_id, over_action_id)
            return False
        return self.reorder_action_buttons(drill_index, from_pos, to_pos)

    def _drill_or_log(self, drill_index: int, command: str) -> Optional[Drill]:
        drill = self.get_drill(drill_index)
        if drill is None:
            logger.debug("Ignoring %s for unknown drill index %s", command, drill_index)
        return drill

    def _action_or_log(self, drill_index: int, action_id: str, command: str) -> Optional[ActionButton]:
        drill = self._drill_or_log(drill_index, command)
        if drill is None:
            return None
        action = drill.find_action(action_id)
        if action is None:
            logger.debug("Ignoring %s for unknown action %r", command, action_id)
        return action
