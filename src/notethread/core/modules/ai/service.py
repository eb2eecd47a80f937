import asyncio
import time
from typing import Any

import litellm
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from notethread.core.core import Service
from notethread.core.modules.ai.models import AIMention
from notethread.core.modules.ai.prompts import build_mention_messages

logger = structlog.get_logger(__name__)


class AIService(Service):
    """Answers comments that mention the assistant.

    Replies run as detached tasks: the comment that triggered them is already stored
    and returned, and responder failures are only logged.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._mention_tasks: set[asyncio.Task[None]] = set()

    async def on_start(self) -> None:
        logger.debug("ai_service_started", model=self.core.config.llm_model)

    async def on_stop(self) -> None:
        """Cancel replies still in flight before the database connection closes."""
        pending = list(self._mention_tasks)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if pending:
            logger.info("ai_mentions_cancelled", count=len(pending))

    def is_mentioned(self, content: str) -> bool:
        """Case-sensitive check for the trigger phrase anywhere in the content."""
        return self.core.config.ai_mention_trigger in content

    def dispatch_mention(self, mention: AIMention) -> None:
        """Hand the comment to the responder in the background without waiting for it."""
        task = asyncio.create_task(self.reply_to_mention(mention))
        self._mention_tasks.add(task)
        task.add_done_callback(self._mention_tasks.discard)
        logger.debug("ai_mention_dispatched", note_id=mention.note_id)

    async def reply_to_mention(self, mention: AIMention) -> None:
        """Ask the LLM about the note and post its answer as a comment. Never raises."""
        start_time = time.time()
        try:
            if not self.core.config.llm_api_key:
                logger.warning("ai_mention_skipped", note_id=mention.note_id, reason="llm_api_key_not_configured")
                return

            note = await self.core.services.note.get_note(mention.note_id)
            response = await litellm.acompletion(
                model=self.core.config.llm_model,
                messages=build_mention_messages(note.content, mention.content, self.core.config.ai_mention_trigger),
                api_key=self.core.config.llm_api_key,
            )
            answer = response.choices[0].message.content
            if not answer or not answer.strip():
                logger.warning("ai_mention_empty_answer", note_id=mention.note_id)
                return

            comment = await self.core.services.comment.create_ai_comment(mention.note_id, answer.strip())
            logger.info(
                "ai_mention_answered",
                note_id=mention.note_id,
                comment_id=comment.id,
                duration_ms=int((time.time() - start_time) * 1000),
            )
        except Exception:
            logger.exception(
                "ai_mention_failed",
                note_id=mention.note_id,
                duration_ms=int((time.time() - start_time) * 1000),
            )
