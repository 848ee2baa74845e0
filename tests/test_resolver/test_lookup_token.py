"""Tests for resolver settings that hosts can change."""

from mudmatch.resolver import EntityResolver
from mudmatch.world.graph import InMemoryWorld
from tests.factories import ALICE, BOB, MASTER_ROOM, TELEPORT


class TestResolverSettings:
    """Tests for the player sigil and master room."""

    def test_custom_lookup_token(self, town: InMemoryWorld):
        resolver = EntityResolver(town, master_room=MASTER_ROOM, lookup_token="!")

        assert resolver.resolve(ALICE, "!bob").entity_id == BOB
        assert not resolver.resolve(ALICE, "*bob").found

    def test_master_room_from_world(self, town: InMemoryWorld, monkeypatch):
        """The world's own master room beats the configured one."""
        monkeypatch.setattr("mudmatch.resolver.resolver.settings.master_room", 999)
        resolver = EntityResolver(town)

        assert resolver.master_room == MASTER_ROOM
        assert resolver.resolve(ALICE, "tb", flags=["everything", "global"]).entity_id == TELEPORT

    def test_master_room_from_settings(self, town: InMemoryWorld, monkeypatch):
        """Without any other master room the configured one is used."""
        town.master_room = None
        monkeypatch.setattr("mudmatch.resolver.resolver.settings.master_room", MASTER_ROOM)
        resolver = EntityResolver(town)

        assert resolver.master_room == MASTER_ROOM
        assert resolver.resolve(ALICE, "tb", flags=["everything", "global"]).entity_id == TELEPORT

    def test_no_master_room(self, town: InMemoryWorld):
        resolver = EntityResolver(town, master_room=999)

        assert not resolver.resolve(ALICE, "tb", flags=["everything", "global"]).found
