from __future__ import annotations

import dataclasses
import json
import logging
import os
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from metrics import saved_simulation_to_dict, study_plan_to_dict, subject_to_dict
from models import SavedSimulationResult, StudyPlan, Subject
from models_pydantic import StudyPlanInput, SubjectInput

logger = logging.getLogger(__name__)

STUDY_PLAN_KEY = "studyPlan"
SUBJECTS_KEY = "subjects"
SAVED_SIMULATION_KEY = "savedSimulation"

ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
DATE_KEYS = frozenset({"studyStartDate", "studyEndDate", "timestamp"})

Subscriber = Callable[[str, Any], None]


def _parse_iso(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def revive_dates(value: Any, key: Optional[str] = None) -> Any:
    """Turn ISO-8601 datetime strings stored under date fields back into datetimes.

    Only keys in ``DATE_KEYS`` are revived, so free text such as a subject
    name that happens to look like a timestamp stays a string.
    """
    if isinstance(value, str):
        if key in DATE_KEYS and ISO_DATETIME_RE.match(value):
            try:
                return _parse_iso(value)
            except ValueError:
                return value
        return value
    if isinstance(value, dict):
        return {k: revive_dates(v, k) for k, v in value.items()}
    if isinstance(value, list):
        return [revive_dates(v, key) for v in value]
    return value


def _process_stored(key: str, value: Any) -> Any:
    # Plan dates may have been stored date-only, which the generic pattern skips.
    if key == STUDY_PLAN_KEY and isinstance(value, dict):
        value = dict(value)
        for field_name in ("studyStartDate", "studyEndDate"):
            raw = value.get(field_name)
            if isinstance(raw, str):
                try:
                    value[field_name] = _parse_iso(raw)
                except ValueError:
                    logger.warning("Could not parse %s %r in stored study plan", field_name, raw)
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class LocalStore:
    """Best-effort key-value cache kept in a single JSON file.

    Read and write failures are logged and never raised: ``get`` falls back
    to the supplied default, ``set`` leaves the previous file untouched.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._subscribers: List[Subscriber] = []
        self._last_stat: Optional[Tuple[int, int]] = self._current_stat()

    def _current_stat(self) -> Optional[Tuple[int, int]]:
        try:
            stat = self.path.stat()
        except OSError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
        if not isinstance(payload, dict):
            raise ValueError(f"Store file {self.path} does not hold a JSON object")
        return payload

    def get(self, key: str, default: Any = None) -> Any:
        try:
            data = self._read_all()
        except (OSError, ValueError) as exc:
            logger.warning("Could not read store %s: %s", self.path, exc)
            return default
        if key not in data:
            return default
        return _process_stored(key, revive_dates(data[key], key))

    def set(self, key: str, value: Any) -> bool:
        try:
            data = self._read_all()
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable store %s: %s", self.path, exc)
            data = {}

        data[key] = value
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=_json_default)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write %s to store %s", key, self.path)
            tmp_path.unlink(missing_ok=True)
            return False

        self._last_stat = self._current_stat()
        self._notify(key, value)
        return True

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def refresh(self) -> bool:
        """Notify subscribers of every key if the file was changed by someone else."""
        stat = self._current_stat()
        if stat == self._last_stat:
            return False
        self._last_stat = stat
        try:
            data = self._read_all()
        except (OSError, ValueError) as exc:
            logger.warning("Could not reload store %s: %s", self.path, exc)
            return False
        for key, value in data.items():
            self._notify(key, _process_stored(key, revive_dates(value, key)))
        return True

    def _notify(self, key: str, value: Any) -> None:
        for callback in list(self._subscribers):
            callback(key, value)


def parse_subjects(items: List[dict]) -> List[Subject]:
    return [SubjectInput.model_validate(item).to_domain() for item in items]


def load_subjects_from_json(path: Path) -> List[Subject]:
    with Path(path).open("r", encoding="utf-8") as f:
        payload = json.load(f)

    if isinstance(payload, dict) and isinstance(payload.get("subjects"), list):
        subjects = parse_subjects(payload["subjects"])
    elif isinstance(payload, list):
        subjects = parse_subjects(payload)
    else:
        subjects = parse_subjects([payload])

    logger.info("Loaded %d subjects from %s", len(subjects), path)
    return subjects


def load_study_plan(store: LocalStore) -> Optional[StudyPlan]:
    raw = store.get(STUDY_PLAN_KEY)
    if raw is None:
        return None
    try:
        return StudyPlanInput.model_validate(raw).to_domain()
    except ValidationError as exc:
        logger.warning("Ignoring invalid stored study plan: %s", exc)
        return None


def load_subjects(store: LocalStore) -> List[Subject]:
    subjects: List[Subject] = []
    for item in store.get(SUBJECTS_KEY, []) or []:
        try:
            subjects.append(SubjectInput.model_validate(item).to_domain())
        except ValidationError as exc:
            logger.warning("Skipping invalid stored subject %r: %s", item, exc)
    return subjects


def save_study_plan(store: LocalStore, plan: StudyPlan) -> bool:
    return store.set(STUDY_PLAN_KEY, study_plan_to_dict(plan))


def save_subjects(store: LocalStore, subjects: List[Subject]) -> bool:
    return store.set(SUBJECTS_KEY, [subject_to_dict(s) for s in subjects])


def save_simulation(store: LocalStore, saved: SavedSimulationResult) -> bool:
    return store.set(SAVED_SIMULATION_KEY, saved_simulation_to_dict(saved))


def load_saved_simulation(store: LocalStore) -> Optional[Dict[str, Any]]:
    return store.get(SAVED_SIMULATION_KEY)
