"""
Pytest configuration and shared fixtures for the Doorknob test suite.

This module provides common fixtures and configuration for all tests.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

import discord
from discord.ext import commands

from doorknob.config.settings import BotConfig
from doorknob.voice import DiscordVoiceTransport, SessionRegistry


@pytest.fixture
def mock_config(tmp_path):
    """Create a configuration for testing."""
    return BotConfig(
        discord_token="mock_discord_token",
        openai_api_key="mock_openai_key",
        command_prefix="!",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
    )


@pytest.fixture
def mock_voice_channel():
    """Create a mock Discord voice channel for testing."""
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = 987654321
    channel.name = "Test Channel"
    return channel


@pytest.fixture
def mock_guild():
    """Create a mock Discord guild for testing."""
    guild = MagicMock(spec=discord.Guild)
    guild.id = 123456789
    guild.name = "Test Guild"
    return guild


@pytest.fixture
def mock_member(mock_guild, mock_voice_channel):
    """Create a mock Discord member sitting in a voice channel."""
    member = MagicMock(spec=discord.Member)
    member.id = 111222333
    member.display_name = "Test User"
    member.guild = mock_guild
    member.voice = MagicMock(spec=discord.VoiceState)
    member.voice.channel = mock_voice_channel
    return member


@pytest.fixture
def mock_context(mock_guild, mock_member):
    """Create a mock Discord command context for testing."""
    context = MagicMock(spec=commands.Context)
    context.guild = mock_guild
    context.author = mock_member
    context.send = AsyncMock()
    context.defer = AsyncMock()
    context.channel = MagicMock(spec=discord.TextChannel)
    return context


@pytest.fixture
def mock_voice_client(mock_guild, mock_voice_channel):
    """Create a mock voice client for testing."""
    voice_client = MagicMock()
    voice_client.guild = mock_guild
    voice_client.channel = mock_voice_channel
    voice_client.is_connected.return_value = True
    voice_client.is_playing.return_value = False
    voice_client.listen = MagicMock()
    return voice_client


@pytest.fixture
def mock_transport(mock_voice_client):
    """Create a mock voice transport whose connections succeed."""
    transport = MagicMock(spec=DiscordVoiceTransport)
    transport.connect = AsyncMock(return_value=mock_voice_client)
    transport.disconnect = AsyncMock()
    transport.set_voice_state = AsyncMock()
    transport.subscribe = MagicMock()
    transport.play = MagicMock()
    return transport


@pytest.fixture
def registry(mock_transport):
    """Create a session registry backed by the mock transport."""
    return SessionRegistry(mock_transport)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
