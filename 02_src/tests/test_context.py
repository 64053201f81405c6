"""Tests for the handler context."""

import pytest

from conftest import CHAT_ID, USER_ID
from dialogkit.context import Context
from dialogkit.models import EventKind, InboundEvent


class TestCaches:
    """Tests for per-user, per-chat and tagged-user caches."""

    @pytest.mark.asyncio
    async def test_user_cache_scoped_to_chat(self, make_context, store):
        ctx = make_context()
        await ctx.user_cache().set("lang", "en", ttl=60)

        assert await store.get(f"userdata:{USER_ID}:{CHAT_ID}:lang") == b"en"
        other_chat = make_context(chat_id=CHAT_ID + 1)
        assert await other_chat.user_cache().get("lang") is None

    @pytest.mark.asyncio
    async def test_chat_cache_shared_by_users(self, make_context, store):
        await make_context(user_id=1).chat_cache().set("topic", b"fruit", ttl=60)

        assert await make_context(user_id=2).chat_cache().get("topic") == b"fruit"
        assert await store.get(f"chatdata:{CHAT_ID}:topic") == b"fruit"

    @pytest.mark.asyncio
    async def test_tagged_user_cache(self, make_context):
        author = make_context(user_id=1, tagged_users=[42, 43])
        assert author.tagged_user_count == 2

        await author.tagged_user_cache(1).set("score", b"10", ttl=60)

        tagged = make_context(user_id=43)
        assert await tagged.user_cache().get("score") == b"10"

    @pytest.mark.parametrize("num", [-1, 1])
    def test_tagged_user_out_of_range(self, make_context, num):
        ctx = make_context(tagged_users=[42])

        with pytest.raises(IndexError, match=r"out of range \(1 tagged users\)"):
            ctx.tagged_user_cache(num)

    def test_no_store_bound(self, transport):
        ctx = Context(transport=transport, user_id=USER_ID, chat_id=CHAT_ID)

        with pytest.raises(RuntimeError):
            ctx.user_cache()

    def test_from_event_copies_tagged_users(self, transport, store):
        event = InboundEvent(
            kind=EventKind.TEXT,
            user_id=USER_ID,
            chat_id=CHAT_ID,
            payload="hi",
            tagged_users=[42],
        )
        ctx = Context.from_event(transport, event, store=store)

        assert ctx.tagged_users == [42]
        assert ctx.tagged_user_cache(0).prefix == f"userdata:42:{CHAT_ID}:"
