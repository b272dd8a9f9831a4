# services/interview_store.py
import json
from typing import Callable, List, Tuple, TypeVar

from fastapi.encoders import jsonable_encoder
from redis.asyncio import Redis
from redis.exceptions import WatchError

from models.interview import Interview
from models.job import Job
from utils.errors import NotFoundError, SessionStateError
from utils.logger import get_logger

log = get_logger("InterviewStore")

T = TypeVar("T")


class InterviewStore:
    """
    JSON documents in Redis: interview:{id} and job:{id}, plus a
    user:{id}:interviews set of interview ids per user.

    Every state transition goes through update(), an optimistic
    WATCH/MULTI/EXEC read-modify-write, so two racing requests for the same
    interview cannot both apply their change on top of the same snapshot.
    """

    def __init__(self, redis: Redis, ttl_seconds: int = 7 * 24 * 3600, max_retries: int = 5):
        self.redis = redis
        self.ttl_seconds = ttl_seconds
        self.max_retries = max_retries

    @staticmethod
    def _interview_key(interview_id: str) -> str:
        return f"interview:{interview_id}"

    @staticmethod
    def _user_key(user_id: str) -> str:
        return f"user:{user_id}:interviews"

    @staticmethod
    def _job_key(job_id: str) -> str:
        return f"job:{job_id}"

    @staticmethod
    def _encode(model) -> str:
        return json.dumps(jsonable_encoder(model))

    async def create(self, interview: Interview) -> None:
        """Persist a brand-new interview; never overwrites an existing one."""
        key = self._interview_key(interview.id)
        created = await self.redis.set(key, self._encode(interview), ex=self.ttl_seconds, nx=True)
        if not created:
            raise SessionStateError(f"Interview {interview.id} already exists")
        user_key = self._user_key(interview.user_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.sadd(user_key, interview.id)
            pipe.expire(user_key, self.ttl_seconds)
            await pipe.execute()
        log.info(f"Interview {interview.id} created.")

    async def get(self, interview_id: str) -> Interview:
        raw = await self.redis.get(self._interview_key(interview_id))
        if not raw:
            raise NotFoundError(f"Interview {interview_id} not found")
        return Interview(**json.loads(raw))

    async def list_for_user(self, user_id: str) -> List[Interview]:
        """Stored interviews of a user; ids whose document expired are skipped."""
        ids = sorted(await self.redis.smembers(self._user_key(user_id)))
        if not ids:
            return []
        raws = await self.redis.mget([self._interview_key(i) for i in ids])
        return [Interview(**json.loads(raw)) for raw in raws if raw]

    async def update(
        self, interview_id: str, mutate: Callable[[Interview], T]
    ) -> Tuple[Interview, T]:
        """
        Load, apply mutate() and write back atomically. Retries when another
        writer touched the key in between. Exceptions from mutate() abort the
        write and propagate unchanged.
        """
        key = self._interview_key(interview_id)
        for attempt in range(1, self.max_retries + 1):
            async with self.redis.pipeline(transaction=True) as pipe:
                try:
                    await pipe.watch(key)
                    raw = await pipe.get(key)
                    if not raw:
                        raise NotFoundError(f"Interview {interview_id} not found")
                    interview = Interview(**json.loads(raw))
                    result = mutate(interview)
                    pipe.multi()
                    pipe.set(key, self._encode(interview), ex=self.ttl_seconds)
                    await pipe.execute()
                    return interview, result
                except WatchError:
                    log.warning(f"Concurrent write on {key}, retry {attempt}/{self.max_retries}")
                    continue
        raise SessionStateError(f"Interview {interview_id} is busy, please retry")

    async def save_job(self, job: Job) -> None:
        await self.redis.set(self._job_key(job.id), self._encode(job))

    async def get_job(self, job_id: str) -> Job:
        raw = await self.redis.get(self._job_key(job_id))
        if not raw:
            raise NotFoundError(f"Job {job_id} not found")
        return Job(**json.loads(raw))

