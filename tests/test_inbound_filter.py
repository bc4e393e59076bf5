from __future__ import annotations

import unittest
from types import SimpleNamespace

from misc.discord_gates import message_drop_reason
from misc.discord_gates import user_is_owner
from relay.inbound import admit_reason
from relay.inbound import pending_from_message

ALLOWED = {1202718026353475594}


def _message(*, channel_id=1202718026353475594, content="hello", bot=False, author_id=55):
    async def _reply(text):
        return text

    return SimpleNamespace(
        id=999,
        guild=SimpleNamespace(id=1),
        channel=SimpleNamespace(id=channel_id),
        author=SimpleNamespace(id=author_id, bot=bot),
        content=content,
        reply=_reply,
    )


class AdmitReasonTests(unittest.TestCase):
    def test_admits_human_message_in_allowed_channel(self):
        self.assertIsNone(
            admit_reason(author_is_bot=False, channel_id="C1", content="hi", allowed_channel_ids={"C1"})
        )

    def test_drops_bot_authors(self):
        self.assertEqual(
            admit_reason(author_is_bot=True, channel_id="C1", content="hi", allowed_channel_ids={"C1"}),
            "bot_author",
        )

    def test_drops_whitespace_only_content(self):
        for content in ("", "   ", "\n\t", None):
            self.assertEqual(
                admit_reason(author_is_bot=False, channel_id="C1", content=content, allowed_channel_ids={"C1"}),
                "empty_content",
            )

    def test_drops_channels_outside_allowlist(self):
        self.assertEqual(
            admit_reason(author_is_bot=False, channel_id="C2", content="hi", allowed_channel_ids={"C1"}),
            "channel_not_allowed",
        )


class DiscordGateTests(unittest.TestCase):
    def test_drop_reason_from_discord_message(self):
        self.assertIsNone(message_drop_reason(_message(), ALLOWED))
        self.assertEqual(message_drop_reason(_message(bot=True), ALLOWED), "bot_author")
        self.assertEqual(message_drop_reason(_message(content="  "), ALLOWED), "empty_content")
        self.assertEqual(message_drop_reason(_message(channel_id=1), ALLOWED), "channel_not_allowed")

    def test_owner_check(self):
        self.assertTrue(user_is_owner(SimpleNamespace(id=237008609773486080), {237008609773486080}))
        self.assertFalse(user_is_owner(SimpleNamespace(id=5), {237008609773486080}))
        self.assertFalse(user_is_owner(SimpleNamespace(id=None), set()))


class PendingFromMessageTests(unittest.TestCase):
    def test_captures_reply_capability_and_ids(self):
        message = _message(content="Hello")
        pending = pending_from_message(message)

        self.assertEqual(pending.channel_id, 1202718026353475594)
        self.assertEqual(pending.author_id, 55)
        self.assertFalse(pending.author_is_bot)
        self.assertEqual(pending.content, "Hello")
        self.assertEqual(pending.message_id, 999)
        self.assertIs(pending.reply, message.reply)


if __name__ == "__main__":
    unittest.main()
