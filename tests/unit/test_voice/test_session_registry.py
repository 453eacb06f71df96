"""
Unit tests for the session registry.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from doorknob.core.types import (
    MSG_ALREADY_IN_VOICE,
    MSG_BOT_NOT_IN_VOICE,
    MSG_JOIN_FAILED,
    MSG_JOINED,
    MSG_LEFT,
    MSG_USER_NOT_IN_VOICE,
)
from doorknob.infrastructure.exceptions import VoiceTransportError
from doorknob.voice import ALL_EVENT_KINDS, VoiceEventSink


class TestSessionRegistryJoinLeave:
    """Test cases for joining and leaving voice channels."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_join_subscribes_all_event_kinds(
        self, registry, mock_transport, mock_guild, mock_member, mock_voice_client
    ):
        """Joining connects, subscribes one sink for all five kinds and registers a session."""
        result = await registry.join(mock_guild, mock_member)

        assert result == {"success": True, "message": MSG_JOINED}
        mock_transport.connect.assert_awaited_once_with(mock_member.voice.channel)
        mock_transport.subscribe.assert_called_once()
        voice_client, sink = mock_transport.subscribe.call_args.args
        assert voice_client is mock_voice_client
        assert isinstance(sink, VoiceEventSink)
        assert sink.event_kinds == ALL_EVENT_KINDS

        session = registry.get(mock_guild.id)
        assert session is not None
        assert session.channel_id == mock_member.voice.channel.id
        assert session.router is sink.router
        assert session.muted is False
        assert session.deafened is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_join_requires_invoker_in_voice(self, registry, mock_transport, mock_guild, mock_member):
        mock_member.voice = None

        result = await registry.join(mock_guild, mock_member)

        assert result == {"success": False, "message": MSG_USER_NOT_IN_VOICE}
        mock_transport.connect.assert_not_awaited()
        assert mock_guild.id not in registry

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_join_twice_is_rejected(self, registry, mock_transport, mock_guild, mock_member):
        await registry.join(mock_guild, mock_member)

        result = await registry.join(mock_guild, mock_member)

        assert result == {"success": False, "message": MSG_ALREADY_IN_VOICE}
        assert mock_transport.connect.await_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_join_failure_creates_no_session(self, registry, mock_transport, mock_guild, mock_member):
        """A failed connection leaves no session and hides the failure detail."""
        mock_transport.connect.side_effect = VoiceTransportError("handshake timed out")

        result = await registry.join(mock_guild, mock_member)

        assert result == {"success": False, "message": MSG_JOIN_FAILED}
        assert registry.get(mock_guild.id) is None
        mock_transport.subscribe.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_concurrent_joins_connect_once(
        self, registry, mock_transport, mock_guild, mock_member, mock_voice_client
    ):
        """Two joins racing for one guild make a single connection."""

        async def slow_connect(channel):
            await asyncio.sleep(0.01)
            return mock_voice_client

        mock_transport.connect.side_effect = slow_connect

        results = await asyncio.gather(
            registry.join(mock_guild, mock_member),
            registry.join(mock_guild, mock_member),
        )

        assert sorted(result["message"] for result in results) == sorted(
            [MSG_JOINED, MSG_ALREADY_IN_VOICE]
        )
        assert mock_transport.connect.await_count == 1
        assert len(registry) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_join_leave_join(self, registry, mock_transport, mock_guild, mock_member):
        """A guild can rejoin after leaving."""
        first = await registry.join(mock_guild, mock_member)
        left = await registry.leave(mock_guild.id)
        second = await registry.join(mock_guild, mock_member)

        assert first["success"] and left["success"] and second["success"]
        assert left["message"] == MSG_LEFT
        assert mock_transport.connect.await_count == 2
        assert mock_transport.disconnect.await_count == 1
        assert len(registry) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_leave_without_session_makes_no_transport_call(self, registry, mock_transport):
        result = await registry.leave(123456789)

        assert result == {"success": False, "message": MSG_BOT_NOT_IN_VOICE}
        mock_transport.disconnect.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_leave_failure_still_drops_session(self, registry, mock_transport, mock_guild, mock_member):
        await registry.join(mock_guild, mock_member)
        mock_transport.disconnect.side_effect = VoiceTransportError("not connected")

        result = await registry.leave(mock_guild.id)

        assert result == {"success": False, "message": "Failed: not connected"}
        assert mock_guild.id not in registry

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sessions_are_per_guild(self, registry, mock_guild, mock_member):
        other_guild = MagicMock()
        other_guild.id = 555

        await registry.join(mock_guild, mock_member)
        await registry.join(other_guild, mock_member)
        await registry.leave(mock_guild.id)

        assert registry.guild_ids() == [555]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_discard_skips_transport(self, registry, mock_transport, mock_guild, mock_member):
        await registry.join(mock_guild, mock_member)

        session = registry.discard(mock_guild.id)

        assert session is not None
        assert registry.get(mock_guild.id) is None
        mock_transport.disconnect.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_close_leaves_every_session(self, registry, mock_transport, mock_guild, mock_member):
        other_guild = MagicMock()
        other_guild.id = 555
        await registry.join(mock_guild, mock_member)
        await registry.join(other_guild, mock_member)

        await registry.close()

        assert len(registry) == 0
        assert mock_transport.disconnect.await_count == 2


class TestSessionRegistryVoiceState:
    """Test cases for mute and deafen."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_mute_without_session(self, registry, mock_transport):
        result = await registry.set_muted(123456789, True)

        assert result == {"success": False, "message": MSG_BOT_NOT_IN_VOICE}
        mock_transport.set_voice_state.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_second_mute_makes_no_transport_call(
        self, registry, mock_transport, mock_guild, mock_member, mock_voice_client
    ):
        """Muting an already muted bot is reported without touching the transport."""
        await registry.join(mock_guild, mock_member)

        first = await registry.set_muted(mock_guild.id, True)
        second = await registry.set_muted(mock_guild.id, True)

        assert first == {"success": True, "message": "I'm now muted."}
        assert second == {"success": False, "message": "I'm already muted."}
        mock_transport.set_voice_state.assert_awaited_once_with(
            mock_voice_client, self_mute=True, self_deaf=False
        )
        assert registry.get(mock_guild.id).muted is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unmute_when_not_muted(self, registry, mock_transport, mock_guild, mock_member):
        await registry.join(mock_guild, mock_member)

        result = await registry.set_muted(mock_guild.id, False)

        assert result == {"success": False, "message": "I'm already unmuted."}
        mock_transport.set_voice_state.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_deafen_keeps_mute_state(
        self, registry, mock_transport, mock_guild, mock_member, mock_voice_client
    ):
        await registry.join(mock_guild, mock_member)
        await registry.set_muted(mock_guild.id, True)

        result = await registry.set_deafened(mock_guild.id, True)

        assert result == {"success": True, "message": "I'm now deafened."}
        mock_transport.set_voice_state.assert_awaited_with(
            mock_voice_client, self_mute=True, self_deaf=True
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_undeafen(self, registry, mock_guild, mock_member):
        await registry.join(mock_guild, mock_member)
        await registry.set_deafened(mock_guild.id, True)

        result = await registry.set_deafened(mock_guild.id, False)
        again = await registry.set_deafened(mock_guild.id, False)

        assert result == {"success": True, "message": "I'm now undeafened."}
        assert again == {"success": False, "message": "I'm already undeafened."}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_mute_keeps_flag(self, registry, mock_transport, mock_guild, mock_member):
        """A failed state change reports only the failure and keeps the old flag."""
        await registry.join(mock_guild, mock_member)
        mock_transport.set_voice_state.side_effect = VoiceTransportError("gateway closed")

        result = await registry.set_muted(mock_guild.id, True)

        assert result == {"success": False, "message": "Failed: gateway closed"}
        assert registry.get(mock_guild.id).muted is False
