# posture_monitor/event_logger.py

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from .events import SimulationEvent

logger = logging.getLogger(__name__)

SAVE_DIR = Path('storage/events')


class EventLogger:
    """
    Append-only log of SimulationEvents for one session.

    Events are kept in memory in arrival order. If `save_dir` is given,
    each event is also appended as one JSON line to a per-session file
    (events_<timestamp>.jsonl). Nothing is ever rewritten or deduplicated.
    """

    def __init__(self, save_dir: Optional[Path] = None):
        self._events: List[SimulationEvent] = []
        self._save_dir = Path(save_dir) if save_dir is not None else None
        self._filepath: Optional[Path] = None

        if self._save_dir is not None:
            self._save_dir.mkdir(parents=True, exist_ok=True)
            self._filepath = self._new_filepath()

    def __call__(self, event: SimulationEvent):
        self.append(event)

    def append(self, event: SimulationEvent):
        self._events.append(event)
        if self._filepath is not None:
            with open(self._filepath, 'a', encoding='utf-8') as f:
                f.write(json.dumps(event.to_dict(), ensure_ascii=False) + '\n')

    @property
    def events(self) -> List[SimulationEvent]:
        return list(self._events)

    @property
    def filepath(self) -> Optional[Path]:
        return self._filepath

    def latest(self) -> Optional[SimulationEvent]:
        return self._events[-1] if self._events else None

    def critical_events(self) -> List[SimulationEvent]:
        return [e for e in self._events if e.is_critical]

    def __len__(self):
        return len(self._events)

    def __iter__(self) -> Iterator[SimulationEvent]:
        return iter(list(self._events))

    def reset(self):
        """Clear the in-memory log and start a new file (e.g. between sessions)."""
        self._events.clear()
        if self._save_dir is not None:
            self._filepath = self._new_filepath()
            logger.info("Event log rotated -> %s", self._filepath)

    def _new_filepath(self) -> Path:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        return self._save_dir / f'events_{timestamp}.jsonl'
