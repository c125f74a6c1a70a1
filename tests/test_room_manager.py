"""Tests for room membership, history and teardown."""
import random

from chatguard.models.models import EventType, SystemNotice, UserText
from chatguard.services.room_manager import (
    JOIN_PHRASES,
    JoinOutcome,
    pick_join_phrase,
)


def test_first_join_creates_room_with_welcome(room_manager, make_connection):
    conn = make_connection()

    outcome = room_manager.join_room("R", conn, "alice")

    assert outcome == JoinOutcome.CREATED
    room = room_manager.get_room("R")
    assert room.members == [conn]
    assert len(room.history) == 1
    welcome = room.history[0]
    assert isinstance(welcome, SystemNotice)
    assert welcome.sender["username"] == "Chatguard"
    assert "Welcome in room R" in welcome.text
    # Nobody else is around, so nothing is sent
    assert conn.sent == []


def test_join_existing_room_broadcasts_notice_to_everyone(room_manager, registry, make_connection):
    c1, c2, c3 = make_connection(), make_connection(), make_connection()
    for conn in (c1, c2, c3):
        registry.register(conn.id)
    room_manager.join_room("lobby", c1, "alice")
    room_manager.join_room("lobby", c2, "bob")

    outcome = room_manager.join_room("lobby", c3, "carol")

    assert outcome == JoinOutcome.JOINED
    room = room_manager.get_room("lobby")
    assert room.members == [c1, c2, c3]
    assert len(room.history) == 3
    notice = room.history[-1]
    assert isinstance(notice, SystemNotice)
    assert "carol" in notice.text
    assert notice.style == {"color": "#22283b"}

    # c1 saw bob's and carol's joins, c3 only its own
    assert [e["type"] for e in c1.envelopes()] == ["join", "join"]
    assert [e["type"] for e in c2.envelopes()] == ["join", "join"]
    assert [e["type"] for e in c3.envelopes()] == ["join"]
    assert c3.envelopes()[0]["message"]["str"] == notice.text
    assert c3.envelopes()[0]["message"]["sender"]["username"] == "Chatguard"


def test_join_without_name_uses_registry_name(room_manager, registry, make_connection):
    c1, c2 = make_connection(), make_connection()
    registry.register(c2.id)
    default_name = registry.name_of(c2.id)
    room_manager.join_room("lobby", c1, "alice")

    room_manager.join_room("lobby", c2, None)

    assert default_name in room_manager.get_room("lobby").history[-1].text
    assert registry.name_of(c2.id) == default_name


def test_empty_room_id_is_accepted(room_manager, make_connection):
    conn = make_connection()

    assert room_manager.join_room("", conn) == JoinOutcome.CREATED
    assert room_manager.current_room_of(conn) == ""
    assert "" in room_manager.rooms


def test_current_room_of(room_manager, make_connection):
    c1, c2 = make_connection(), make_connection()
    room_manager.join_room("a", c1)

    assert room_manager.current_room_of(c1) == "a"
    assert room_manager.current_room_of(c2) is None


def test_append_and_broadcast(room_manager, make_connection):
    c1, c2 = make_connection(), make_connection()
    room_manager.join_room("a", c1, "alice")
    room_manager.join_room("a", c2, "bob")
    message = UserText(sender={"username": "alice"}, text="hi", style={})

    delivered = room_manager.append_and_broadcast("a", EventType.MESSAGE, message)

    assert delivered == 2
    assert room_manager.get_room("a").history[-1] is message
    assert c2.envelopes()[-1] == {
        "type": "message",
        "message": {"sender": {"username": "alice"}, "str": "hi", "style": {}},
    }


def test_remove_one_of_two_members_keeps_room(room_manager, registry, make_connection):
    c1, c2 = make_connection(), make_connection()
    registry.register(c1.id)
    registry.register(c2.id)
    room_manager.join_room("a", c1)
    room_manager.join_room("a", c2)

    room_manager.remove_connection(c1)

    room = room_manager.get_room("a")
    assert room.members == [c2]
    assert c1.id not in registry
    assert room_manager.current_room_of(c1) is None


def test_remove_last_member_deletes_room(room_manager, make_connection):
    conn = make_connection()
    room_manager.join_room("a", conn)

    room_manager.remove_connection(conn)

    assert room_manager.get_room("a") is None
    assert room_manager.rooms == {}


def test_remove_connection_is_idempotent(room_manager, registry, make_connection):
    stranger = make_connection()
    registry.register(stranger.id)

    room_manager.remove_connection(stranger)
    room_manager.remove_connection(stranger)

    assert room_manager.rooms == {}
    assert stranger.id not in registry


def test_no_empty_room_survives_removals(room_manager, make_connection):
    conns = [make_connection() for _ in range(6)]
    for i, conn in enumerate(conns):
        room_manager.join_room(f"room-{i % 3}", conn)

    for conn in conns:
        room_manager.remove_connection(conn)
        assert all(room.members for room in room_manager.list_rooms())

    assert room_manager.rooms == {}


def test_rejoining_same_room_only_renames(room_manager, registry, make_connection):
    c1, c2 = make_connection(), make_connection()
    room_manager.join_room("a", c1, "alice")
    room_manager.join_room("a", c2, "bob")
    history_before = list(room_manager.get_room("a").history)

    outcome = room_manager.join_room("a", c2, "robert")

    assert outcome == JoinOutcome.ALREADY_MEMBER
    room = room_manager.get_room("a")
    assert room.members == [c1, c2]
    assert room.history == history_before
    assert registry.name_of(c2.id) == "robert"


def test_joining_another_room_leaves_the_current_one(room_manager, make_connection):
    c1, c2 = make_connection(), make_connection()
    room_manager.join_room("a", c1)
    room_manager.join_room("a", c2)
    room_manager.join_room("b", c1)

    room_manager.join_room("b", c2)

    assert room_manager.get_room("a") is None
    assert room_manager.get_room("b").members == [c1, c2]
    assert room_manager.current_room_of(c2) == "b"


def test_closed_member_is_skipped(room_manager, make_connection):
    c1, c2, c3 = make_connection(), make_connection(), make_connection()
    room_manager.join_room("a", c1)
    room_manager.join_room("a", c2)
    c1.open = False

    room_manager.join_room("a", c3)

    # c1 only has c2's join notice from before it closed
    assert len(c1.envelopes()) == 1
    assert len(c2.envelopes()) == 2
    assert len(c3.envelopes()) == 1


def test_pick_join_phrase_interpolates_name():
    rng = random.Random(0)

    for _ in range(50):
        assert "Alice" in pick_join_phrase("Alice", rng)


def test_pick_join_phrase_covers_every_template():
    rng = random.Random(99)
    seen = {pick_join_phrase("x", rng) for _ in range(2000)}

    assert len(JOIN_PHRASES) == 15
    assert seen == {phrase.format(username="x") for phrase in JOIN_PHRASES}
