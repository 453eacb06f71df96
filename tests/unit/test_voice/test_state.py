"""
Unit tests for the participant directory and tick aggregator.
"""

import threading

import pytest

from doorknob.voice.state import ParticipantDirectory, TickAggregator


class TestParticipantDirectory:
    """Test cases for ParticipantDirectory."""

    @pytest.mark.unit
    def test_assign_and_resolve(self):
        """An assigned SSRC resolves to its participant."""
        directory = ParticipantDirectory()

        assert directory.assign(42, 1001) is None
        assert directory.resolve(42) == 1001
        assert 42 in directory
        assert len(directory) == 1

    @pytest.mark.unit
    def test_last_write_wins(self):
        """A later assignment for the same SSRC replaces the earlier one."""
        directory = ParticipantDirectory()
        directory.assign(42, 1001)

        previous = directory.assign(42, 2002)

        assert previous == 1001
        assert directory.resolve(42) == 2002
        assert len(directory) == 1

    @pytest.mark.unit
    def test_unknown_ssrc_resolves_to_none(self):
        assert ParticipantDirectory().resolve(7) is None

    @pytest.mark.unit
    def test_remove_participant_drops_all_bindings(self):
        """Removing a participant drops every SSRC bound to it."""
        directory = ParticipantDirectory()
        directory.assign(1, 1001)
        directory.assign(2, 1001)
        directory.assign(3, 2002)

        removed = directory.remove_participant(1001)

        assert sorted(removed) == [1, 2]
        assert directory.snapshot() == {3: 2002}

    @pytest.mark.unit
    def test_remove_ssrc(self):
        directory = ParticipantDirectory()
        directory.assign(1, 1001)

        assert directory.remove_ssrc(1) == 1001
        assert directory.remove_ssrc(1) is None
        assert directory.ssrcs() == []

    @pytest.mark.unit
    def test_concurrent_assignments(self):
        """Assignments from several threads are all recorded."""
        directory = ParticipantDirectory()

        def assign_range(offset):
            for i in range(200):
                directory.assign(offset + i, offset + i)

        threads = [threading.Thread(target=assign_range, args=(n * 1000,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(directory) == 800
        assert directory.resolve(3199) == 3199


class TestTickAggregator:
    """Test cases for TickAggregator."""

    @pytest.mark.unit
    def test_starts_active(self):
        assert TickAggregator().silent is False

    @pytest.mark.unit
    def test_mark_silent_reports_only_transitions(self):
        """Only the first silent tick of a run is a transition."""
        ticks = TickAggregator()

        assert ticks.mark_silent() is True
        assert ticks.mark_silent() is False
        assert ticks.mark_silent() is False
        assert ticks.silent is True

    @pytest.mark.unit
    def test_mark_active_resets_silence(self):
        ticks = TickAggregator()
        ticks.mark_silent()

        assert ticks.mark_active() is True
        assert ticks.silent is False
        assert ticks.mark_active() is False
        assert ticks.mark_silent() is True
