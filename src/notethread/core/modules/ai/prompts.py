def build_mention_reply_prompt(note_content: str) -> str:
    """Build system prompt for answering a comment that mentions the assistant."""
    return f"""You are Blinko AI, an assistant that answers readers in the comment section of a published note.

NOTE:
{note_content}

RULES:
- Answer the reader's comment directly, using the note as context
- Reply in the same language as the comment
- Keep the answer short: a few sentences, no headings
- If the note does not contain the answer, say so instead of guessing
- Plain text or light markdown only"""


def build_mention_messages(note_content: str, comment_content: str, trigger: str) -> list[dict[str, str]]:
    """Chat messages for the responder: note as system context, comment without the trigger as user turn."""
    question = comment_content.replace(trigger, "").strip() or comment_content
    return [
        {"role": "system", "content": build_mention_reply_prompt(note_content)},
        {"role": "user", "content": question},
    ]
