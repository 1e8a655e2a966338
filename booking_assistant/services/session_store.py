# booking_assistant/services/session_store.py

"""
Conversation session storage.

`SessionStore` is the port the chatbot engine talks to. Two adapters:

- `InMemorySessionStore`: a dict guarded by an asyncio lock, swept for idle
  sessions by a background task.
- `MongoSessionStore`: one document per session in `chat_sessions`, capped
  with `$push`/`$slice`, expired by a TTL index on `last_activity`.

Unknown session ids are never an error: `get_or_create` always succeeds.
Concurrent messages on the same session id are not serialised; context merge
is last-write-wins and history follows arrival order.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Dict, Iterable, Optional
from uuid import uuid4
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from booking_assistant.core.logger import logger
from booking_assistant.models.session import ConversationTurn, Session, SlotContext, utcnow


def new_session_id() -> str:
    return str(uuid4())


class SessionStore(ABC):
    def __init__(self, history_limit: int = 20):
        self.history_limit = history_limit

    @abstractmethod
    async def get(self, session_id: str) -> Optional[Session]:
        ...

    @abstractmethod
    async def get_or_create(self, session_id: str) -> Session:
        ...

    @abstractmethod
    async def append(self, session_id: str, *turns: ConversationTurn) -> None:
        ...

    @abstractmethod
    async def merge_context(self, session_id: str, partial: SlotContext, clear: Iterable[str] = ()) -> SlotContext:
        """
        Merge non-empty slots into the session context and return the result.

        Slots named in `clear` are reset first; empty values in `partial` never
        overwrite anything.
        """

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        ...

    @abstractmethod
    async def sweep_expired(self, max_idle: timedelta) -> int:
        """Delete sessions idle for longer than `max_idle`; return how many went."""


class InMemorySessionStore(SessionStore):
    def __init__(self, history_limit: int = 20, clock=utcnow):
        super().__init__(history_limit)
        self.clock = clock
        self._sessions: Dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def get_or_create(self, session_id: str) -> Session:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                now = self.clock()
                session = Session(session_id=session_id, created_at=now, last_activity=now)
                self._sessions[session_id] = session
                logger.info("Created chat session %s", session_id)
            return session.model_copy(deep=True)

    async def append(self, session_id: str, *turns: ConversationTurn) -> None:
        async with self._lock:
            session = self._sessions.setdefault(session_id, Session(session_id=session_id))
            history = session.history + list(turns)
            session.history = history[-self.history_limit:]
            session.last_activity = self.clock()

    async def merge_context(self, session_id: str, partial: SlotContext, clear: Iterable[str] = ()) -> SlotContext:
        async with self._lock:
            session = self._sessions.setdefault(session_id, Session(session_id=session_id))
            context = session.context.model_copy(update=dict.fromkeys(clear))
            session.context = context.merged_with(partial)
            session.last_activity = self.clock()
            return session.context.model_copy()

    async def delete(self, session_id: str) -> bool:
        async with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def sweep_expired(self, max_idle: timedelta) -> int:
        cutoff = self.clock() - max_idle
        async with self._lock:
            expired = [sid for sid, s in self._sessions.items() if s.last_activity < cutoff]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("Swept %d idle chat sessions", len(expired))
        return len(expired)


class MongoSessionStore(SessionStore):
    def __init__(self, collection: AsyncIOMotorCollection, history_limit: int = 20, ttl_hours: int = 24, clock=utcnow):
        super().__init__(history_limit)
        self.collection = collection
        self.ttl_hours = ttl_hours
        self.clock = clock

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("session_id", unique=True)
        await self.collection.create_index(
            "last_activity", expireAfterSeconds=self.ttl_hours * 3600
        )

    def _to_session(self, doc: dict) -> Session:
        now = self.clock()
        return Session(
            session_id=doc["session_id"],
            history=doc.get("history", []),
            context=SlotContext.model_validate(doc.get("context") or {}),
            created_at=doc.get("created_at") or now,
            last_activity=doc.get("last_activity") or now,
        )

    async def get(self, session_id: str) -> Optional[Session]:
        doc = await self.collection.find_one({"session_id": session_id})
        return self._to_session(doc) if doc else None

    async def get_or_create(self, session_id: str) -> Session:
        now = self.clock()
        doc = await self.collection.find_one_and_update(
            {"session_id": session_id},
            {
                "$setOnInsert": {
                    "session_id": session_id,
                    "history": [],
                    "context": {},
                    "created_at": now,
                    "last_activity": now,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return self._to_session(doc)

    async def append(self, session_id: str, *turns: ConversationTurn) -> None:
        await self.collection.update_one(
            {"session_id": session_id},
            {
                "$push": {
                    "history": {
                        "$each": [turn.model_dump(mode="json", exclude_none=True) for turn in turns],
                        "$slice": -self.history_limit,
                    }
                },
                "$set": {"last_activity": self.clock()},
            },
            upsert=True,
        )

    async def merge_context(self, session_id: str, partial: SlotContext, clear: Iterable[str] = ()) -> SlotContext:
        updates = {
            f"context.{key}": value
            for key, value in partial.model_dump(mode="json").items()
            if value
        }
        updates["last_activity"] = self.clock()
        update = {"$set": updates}
        unset = {f"context.{key}": "" for key in clear if f"context.{key}" not in updates}
        if unset:
            update["$unset"] = unset
        doc = await self.collection.find_one_and_update(
            {"session_id": session_id},
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return SlotContext.model_validate(doc.get("context") or {})

    async def delete(self, session_id: str) -> bool:
        result = await self.collection.delete_one({"session_id": session_id})
        return result.deleted_count > 0

    async def sweep_expired(self, max_idle: timedelta) -> int:
        result = await self.collection.delete_many(
            {"last_activity": {"$lt": self.clock() - max_idle}}
        )
        if result.deleted_count:
            logger.info("Swept %d idle chat sessions", result.deleted_count)
        return result.deleted_count


async def run_sweeper(store: SessionStore, max_idle: timedelta, interval_seconds: float) -> None:
    """Periodic idle-session sweep; runs until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await store.sweep_expired(max_idle)
        except Exception:
            logger.exception("Session sweep failed")


def build_session_store(backend: str, history_limit: int, ttl_hours: int) -> SessionStore:
    if backend == "mongo":
        from booking_assistant.db.mongo import chat_sessions_collection

        return MongoSessionStore(chat_sessions_collection, history_limit=history_limit, ttl_hours=ttl_hours)
    return InMemorySessionStore(history_limit=history_limit)
