import pytest

from clubcache.errors import MemberNotFoundError
from clubcache.structures.channel import CATEGORY, NEWS, STORE, TEXT, VOICE, ClubChannel, is_nsfw_name
from clubcache.structures.permission import ALL, PERMISSIONS

A = PERMISSIONS["read_messages"]
B = PERMISSIONS["send_messages"]
C = PERMISSIONS["embed_links"]


def _channel(client, club, **fields):
    payload = {"id": 500000000000000001, "type": 0, "name": "general", **fields}
    return club.channels.add(payload, client, club)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("nsfw", True),
        ("nsfw-art", True),
        ("nsfwx", False),
        ("NSFW", False),
        ("art-nsfw", False),
        ("general", False),
        ("", False),
        (None, False),
    ],
)
def test_nsfw_name_heuristic(name, expected):
    assert is_nsfw_name(name) is expected


def test_explicit_flag_forces_nsfw(client, club):
    channel = _channel(client, club, name="general", nsfw=True)

    assert channel.nsfw is True


def test_absent_flag_keeps_name_heuristic(client, club):
    channel = _channel(client, club, name="nsfw-memes")
    assert channel.nsfw is True

    channel.update({"position": 4})
    assert channel.nsfw is True

    channel.update({"name": "memes"})
    assert channel.nsfw is False


def test_channel_fields_merge_presence_aware(client, club, ids):
    channel = club.channels.get(ids.text)
    assert channel.parent_id == ids.category
    assert channel.club is club
    assert club.client.channel_club_map[ids.text] == ids.club

    channel.update({"topic": "hello"})
    assert channel.name == "chat"
    assert channel.position == 1
    assert channel.topic == "hello"

    channel.update({"parent_id": None, "topic": ""})
    assert channel.parent_id is None
    assert channel.topic == ""


def test_overwrites_replace_as_a_set(client, club):
    channel = _channel(
        client,
        club,
        permission_overwrites=[
            {"id": 1, "type": "role", "allow": A, "deny": 0},
            {"id": 2, "type": "member", "allow": 0, "deny": B},
        ],
    )
    assert channel.permission_overwrites.keys() == [1, 2]

    channel.update({"name": "renamed"})
    assert len(channel.permission_overwrites) == 2

    channel.update({"permission_overwrites": [{"id": 3, "type": "role", "allow": C, "deny": 0}]})
    assert channel.permission_overwrites.keys() == [3]

    channel.update({"permission_overwrites": []})
    assert len(channel.permission_overwrites) == 0


def test_overwrite_precedence(client, club, ids):
    everyone = club.roles.get(ids.club)
    everyone.update({"permissions": A})
    club.members.get(ids.member).update({"roles": [str(ids.mod_role)]})
    club.roles.get(ids.mod_role).update({"permissions": 0})

    channel = _channel(
        client,
        club,
        permission_overwrites=[
            {"id": ids.club, "type": "role", "allow": 0, "deny": A},
            {"id": ids.mod_role, "type": "role", "allow": B, "deny": 0},
            {"id": ids.member, "type": "member", "allow": 0, "deny": B},
        ],
    )

    resolved = channel.permissions_of(ids.member)

    assert not resolved.allow & A
    assert not resolved.allow & B
    assert resolved.allow == 0


def test_role_overwrites_are_pooled(client, club, ids):
    second_role = 300000000000000010
    club.roles.add({"id": second_role, "name": "helper", "permissions": 0}, club)
    member = club.members.get(ids.member)
    member.update({"roles": [ids.mod_role, second_role]})

    channel = _channel(
        client,
        club,
        permission_overwrites=[
            {"id": ids.mod_role, "type": "role", "allow": 0, "deny": C},
            {"id": second_role, "type": "role", "allow": C, "deny": 0},
        ],
    )
    assert channel.permissions_of(member).allow & C

    # Role order on the member must not matter.
    member.update({"roles": [second_role, ids.mod_role]})
    assert channel.permissions_of(member).allow & C


def test_member_overwrite_wins_over_roles(client, club, ids):
    channel = _channel(
        client,
        club,
        permission_overwrites=[
            {"id": ids.mod_role, "type": "role", "allow": 0, "deny": B},
            {"id": ids.member, "type": "member", "allow": B, "deny": 0},
        ],
    )

    assert channel.permissions_of(ids.member).send_messages


def test_administrator_ignores_overwrites(client, club, ids):
    club.members.get(ids.member).update({"roles": [ids.admin_role]})
    channel = _channel(
        client,
        club,
        permission_overwrites=[
            {"id": ids.club, "type": "role", "allow": 0, "deny": ALL},
            {"id": ids.member, "type": "member", "allow": 0, "deny": ALL},
        ],
    )

    assert channel.permissions_of(ids.member).allow == ALL


def test_owner_ignores_overwrites(client, club, ids):
    channel = _channel(
        client,
        club,
        permission_overwrites=[{"id": ids.owner, "type": "member", "allow": 0, "deny": ALL}],
    )

    assert channel.permissions_of(club.members.get(ids.owner)).allow == ALL


def test_unknown_member_id_raises(client, club, ids):
    channel = club.channels.get(ids.text)

    with pytest.raises(MemberNotFoundError):
        channel.permissions_of(ids.stranger)


def test_channel_resolves_club_by_id_when_not_given(client, club, ids):
    channel = ClubChannel({"id": 600000000000000001, "name": "loose", "club_id": str(ids.club)}, client)

    assert channel.club is club
    assert channel.club_id == ids.club


def test_to_json(client, club, ids):
    projected = club.channels.get(ids.text).to_json()

    assert projected["name"] == "chat"
    assert projected["nsfw"] is False
    assert projected["parent_id"] == ids.category
    assert projected["permission_overwrites"] == []
    assert "club" not in projected


def test_channel_kinds(client, club, ids):
    assert club.channels.get(ids.category).type == CATEGORY
    assert club.channels.get(ids.text).type == TEXT
    assert club.channels.get(ids.voice).type == VOICE

    news = _channel(client, club, type=NEWS, name="announcements")
    assert news.type == NEWS

    news.update({"type": STORE})
    assert news.type == STORE
    assert news.name == "announcements"
