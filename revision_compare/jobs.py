"""
Comparison Job Manager
======================
Version: module v1.0

Optional fire-and-forget wrapper that runs an HTML comparison on a
worker thread so latency-sensitive callers are not blocked. The
comparison itself is synchronous and knows nothing about this module.

Features:
- Short unique job IDs
- Status polling with elapsed time
- Cancellation (a cancelled job discards its result)
- Thread-safe job storage with TTL cleanup
"""

import uuid
import time
import threading
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Callable
from datetime import datetime

from .config_logging import get_logger, RevisionCompareError
from .differ import DocumentDiffer

__version__ = "1.0.0"

logger = get_logger('revision_compare.jobs')


class JobStatus(Enum):
    """Overall job status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"


FINISHED_STATUSES = (JobStatus.COMPLETE, JobStatus.FAILED, JobStatus.CANCELLED)


@dataclass
class ComparisonJob:
    """Represents a background comparison."""
    job_id: str
    status: JobStatus = JobStatus.PENDING
    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    completed_at: Optional[float] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    done: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def elapsed_seconds(self) -> float:
        """Get elapsed time in seconds."""
        if self.started_at is None:
            return 0.0
        end_time = self.completed_at or time.time()
        return end_time - self.started_at

    @property
    def elapsed_formatted(self) -> str:
        """Get formatted elapsed time (e.g., '1m 23s')."""
        elapsed = self.elapsed_seconds
        if elapsed < 60:
            return f"{elapsed:.1f}s"
        minutes = int(elapsed // 60)
        seconds = int(elapsed % 60)
        return f"{minutes}m {seconds}s"

    def to_dict(self, include_result: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        data = {
            "job_id": self.job_id,
            "status": self.status.value,
            "created_at": datetime.fromtimestamp(self.created_at).isoformat(),
            "started_at": datetime.fromtimestamp(self.started_at).isoformat() if self.started_at else None,
            "completed_at": datetime.fromtimestamp(self.completed_at).isoformat() if self.completed_at else None,
            "elapsed": self.elapsed_formatted,
            "error": self.error,
            "metadata": self.metadata
        }
        if include_result and self.result is not None:
            data["result"] = self.result
        return data


class ComparisonJobManager:
    """
    Thread-safe manager for background comparisons.

    Usage:
        manager = ComparisonJobManager()
        job_id = manager.submit(left_html, right_html)
        manager.wait(job_id, timeout=5)
        manager.get_job(job_id).to_dict(include_result=True)
    """

    def __init__(
        self,
        max_jobs: int = 100,
        job_ttl: float = 3600,
        differ_factory: Callable[[], DocumentDiffer] = DocumentDiffer
    ):
        """
        Initialize job manager.

        Args:
            max_jobs: Maximum jobs to keep in memory
            job_ttl: Time-to-live for finished jobs (seconds)
            differ_factory: Builds the differ used by each job
        """
        self._jobs: Dict[str, ComparisonJob] = {}
        self._lock = threading.RLock()
        self._max_jobs = max_jobs
        self._job_ttl = job_ttl
        self._differ_factory = differ_factory

    def submit(self, left_html: str, right_html: str,
               metadata: Optional[Dict[str, Any]] = None) -> str:
        """
        Start a comparison on a worker thread.

        Returns:
            Job ID for polling
        """
        with self._lock:
            self._cleanup_old_jobs()
            job_id = str(uuid.uuid4())[:8]
            job = ComparisonJob(job_id=job_id, metadata=metadata or {})
            self._jobs[job_id] = job

        worker = threading.Thread(
            target=self._run,
            args=(job, left_html, right_html),
            name=f"compare-{job_id}",
            daemon=True
        )
        worker.start()
        logger.info(f"Submitted comparison job {job_id}", job_id=job_id)
        return job_id

    def _run(self, job: ComparisonJob, left_html: str, right_html: str):
        with self._lock:
            if job.status is JobStatus.CANCELLED:
                job.done.set()
                return
            job.status = JobStatus.RUNNING
            job.started_at = time.time()

        try:
            result = self._differ_factory().compare_html(left_html, right_html).to_dict()
        except RevisionCompareError as e:
            self._finish(job, error=e.message)
            return
        except Exception as e:
            logger.exception(f"Comparison job {job.job_id} failed: {e}", job_id=job.job_id)
            self._finish(job, error=f"{type(e).__name__}: {e}")
            return

        self._finish(job, result=result)

    def _finish(self, job: ComparisonJob, result: Optional[Dict[str, Any]] = None,
                error: Optional[str] = None):
        with self._lock:
            if job.status is not JobStatus.CANCELLED:
                job.completed_at = time.time()
                if error is not None:
                    job.status = JobStatus.FAILED
                    job.error = error
                    logger.warning(f"Comparison job {job.job_id} failed: {error}", job_id=job.job_id)
                else:
                    job.status = JobStatus.COMPLETE
                    job.result = result
                    logger.info(f"Comparison job {job.job_id} complete in {job.elapsed_formatted}",
                                job_id=job.job_id)
        job.done.set()

    def get_job(self, job_id: str) -> Optional[ComparisonJob]:
        """Get job by ID."""
        with self._lock:
            return self._jobs.get(job_id)

    def wait(self, job_id: str, timeout: Optional[float] = None) -> bool:
        """
        Block until a job finishes.

        Returns:
            True if the job finished within timeout, False otherwise
            (or when the job is unknown)
        """
        job = self.get_job(job_id)
        if not job:
            return False
        return job.done.wait(timeout)

    def cancel_job(self, job_id: str) -> bool:
        """
        Cancel a pending or running job. A running comparison completes
        in the background but its result is discarded.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if not job or job.status not in (JobStatus.PENDING, JobStatus.RUNNING):
                return False
            job.status = JobStatus.CANCELLED
            job.completed_at = time.time()
            return True

    def list_jobs(self, status: Optional[JobStatus] = None, limit: int = 20) -> List[Dict[str, Any]]:
        """
        List jobs, newest first.

        Args:
            status: Filter by status
            limit: Maximum results
        """
        with self._lock:
            jobs = list(self._jobs.values())

        if status:
            jobs = [j for j in jobs if j.status == status]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return [j.to_dict() for j in jobs[:limit]]

    def _cleanup_old_jobs(self):
        """Remove old finished jobs."""
        now = time.time()
        expired = [
            job_id for job_id, job in self._jobs.items()
            if job.status in FINISHED_STATUSES
            and job.completed_at and (now - job.completed_at) > self._job_ttl
        ]
        for job_id in expired:
            del self._jobs[job_id]

        # If still over capacity, remove oldest finished jobs
        if len(self._jobs) >= self._max_jobs:
            finished = sorted(
                ((jid, j) for jid, j in self._jobs.items() if j.status in FINISHED_STATUSES),
                key=lambda item: item[1].completed_at or 0
            )
            while len(self._jobs) >= self._max_jobs and finished:
                jid, _ = finished.pop(0)
                del self._jobs[jid]


# Global job manager instance
_job_manager: Optional[ComparisonJobManager] = None


def get_job_manager() -> ComparisonJobManager:
    """Get or create the global job manager instance."""
    global _job_manager
    if _job_manager is None:
        _job_manager = ComparisonJobManager()
    return _job_manager


def reset_job_manager():
    """Reset the global job manager (for testing)."""
    global _job_manager
    _job_manager = None
