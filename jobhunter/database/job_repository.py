"""Repository for the saved job applications list."""

import json
import logging
from typing import List

from pydantic import ValidationError

from jobhunter.database.kv_store import KeyValueStore
from jobhunter.models.constants import JOBS_KEY
from jobhunter.models.job import JobApplication

logger = logging.getLogger(__name__)


class JobRepository:
    """Reads and writes the job applications blob (a JSON array).

    An unparsable blob loads as an empty list. Individual entries that fail
    validation are skipped so one bad record does not hide the rest.
    """

    def __init__(self, store: KeyValueStore, key: str = JOBS_KEY):
        self.store = store
        self.key = key

    def load_jobs(self) -> List[JobApplication]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring unparsable {self.key}: {type(e).__name__}: {str(e)}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring {self.key}: expected a JSON array, got {type(data).__name__}")
            return []

        jobs: List[JobApplication] = []
        for item in data:
            try:
                jobs.append(JobApplication.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid entry in {self.key}: {e.error_count()} validation errors")
        return jobs

    def save_jobs(self, jobs: List[JobApplication]) -> None:
        """Overwrite the whole list."""
        blob = [job.model_dump(mode="json", by_alias=True) for job in jobs]
        self.store.set(self.key, json.dumps(blob))
