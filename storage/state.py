"""
Run-state checkpoints so an interrupted batch can resume where it stopped.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from models.schema import RunState, utc_now_iso

logger = logging.getLogger(__name__)

STATE_FILENAME = ".run_state.json"


class StateStore:
    """
    JSON file holding the RunState of the current batch.

    The orchestrator loads it before the first query, saves it after every
    finished query and clears it once the batch completes.
    """

    def __init__(self, path: str):
        self.path = path

    @classmethod
    def in_dir(cls, output_dir: str) -> "StateStore":
        return cls(os.path.join(output_dir, STATE_FILENAME))

    def load(self) -> RunState:
        """Saved state, or a fresh one if there is none (or it is unreadable)."""
        if not os.path.exists(self.path):
            return RunState()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable checkpoint %s: %s", self.path, e)
            return RunState()
        if not data:
            return RunState()
        try:
            return RunState.from_dict(data)
        except ValidationError as e:
            logger.warning("Ignoring invalid checkpoint %s: %s", self.path, e)
            return RunState()

    def resume_index(self) -> int:
        return self.load().current_query_index

    def on_query_complete(self, state: RunState) -> None:
        self.save(state)

    def save(self, state: RunState) -> None:
        state.last_saved = utc_now_iso()
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, indent=2)
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


class NullStateStore(StateStore):
    """Checkpointing disabled: always starts fresh, never writes."""

    def __init__(self):
        super().__init__("")

    def load(self) -> RunState:
        return RunState()

    def save(self, state: RunState) -> None:
        return None

    def clear(self) -> None:
        return None
