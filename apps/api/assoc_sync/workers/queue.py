from __future__ import annotations

import logging

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue, Retry

from assoc_sync.core.config import get_settings

logger = logging.getLogger(__name__)

QUEUE_NAME = "associations"


def _get_queue() -> Queue:
    settings = get_settings()
    conn = Redis.from_url(settings.redis_url)
    return Queue(QUEUE_NAME, connection=conn, default_timeout=settings.queue_job_timeout_seconds)


def _run_inline(job_name: str, *args, **kwargs) -> dict:
    from assoc_sync.workers import jobs

    handler = getattr(jobs, job_name)
    return handler(*args, **kwargs)


def enqueue_job(job_name: str, *args, **kwargs) -> dict:
    """Dispatch a job from `assoc_sync.workers.jobs`.

    Returns `{"job_id", "status"}`; inline runs also carry the job's `result`.
    """
    settings = get_settings()
    if settings.queue_mode == "inline":
        result = _run_inline(job_name, *args, **kwargs)
        return {"job_id": f"inline-{job_name}", "status": "finished", "result": result}

    try:
        queue = _get_queue()
        retry = None
        if settings.queue_retry_max > 0:
            retry = Retry(
                max=settings.queue_retry_max,
                interval=settings.queue_retry_interval_seconds,
            )
        job = queue.enqueue(
            f"assoc_sync.workers.jobs.{job_name}",
            *args,
            retry=retry,
            **kwargs,
        )
        logger.info("enqueued_job", extra={"job_name": job_name, "job_id": job.id})
        return {"job_id": job.id, "status": "enqueued"}
    except RedisError:  # pragma: no cover - network failure fallback
        logger.exception("redis_enqueue_failed_falling_back_inline", extra={"job_name": job_name})
        result = _run_inline(job_name, *args, **kwargs)
        return {"job_id": f"fallback-inline-{job_name}", "status": "finished", "result": result}
