"""
Room lifecycle: create, join, auto-start, explicit start, state and players
"""
import pytest

from overlap.core.errors import (
    AlreadyStartedError,
    InsufficientPlayersError,
    InvalidInputError,
    NoPromptsError,
    NotFoundError,
    RoomFullError,
)
from overlap.core.phase_clock import ANSWERING
from overlap.models import Game, Player, Round
from overlap.services import RoomService


async def test_create_room_starts_in_lobby(services, db):
    created = await services.rooms.create_room()

    game = db.query(Game).filter(Game.room_code == created.room_code).one()
    assert len(created.room_code) == 4
    assert game.status == "lobby"
    assert game.current_round == 0
    assert game.current_phase is None


async def test_join_assigns_contiguous_join_order(services, new_room, db):
    room_code, player_ids = await new_room("Ana", "Ben", "Cy")

    players = await services.rooms.list_players(room_code)
    assert [p.join_order for p in players] == [1, 2, 3]
    assert [p.id for p in players] == player_ids
    assert [p.player_name for p in players] == ["Ana", "Ben", "Cy"]


async def test_join_trims_name(services, new_room):
    room_code, _ = await new_room()
    joined = await services.rooms.join(room_code, "   Dana  ")
    assert joined.player_name == "Dana"


@pytest.mark.parametrize("name", [None, "", "    ", "x" * 21])
async def test_join_rejects_bad_names(services, new_room, name):
    room_code, _ = await new_room()
    with pytest.raises(InvalidInputError):
        await services.rooms.join(room_code, name)


async def test_join_accepts_twenty_character_name(services, new_room):
    room_code, _ = await new_room()
    joined = await services.rooms.join(room_code, "y" * 20)
    assert joined.player_name == "y" * 20


async def test_join_unknown_room(services):
    with pytest.raises(NotFoundError):
        await services.rooms.join("ZZZZ", "Ana")


async def test_room_stays_in_lobby_until_fourth_join(services, new_room, prompts, db):
    room_code, _ = await new_room()
    for name in ("Ana", "Ben", "Cy"):
        await services.rooms.join(room_code, name)
        assert (await services.rooms.get_state(room_code)).status == "lobby"

    await services.rooms.join(room_code, "Dee")

    state = await services.rooms.get_state(room_code)
    assert state.status == "playing"
    assert state.current_round == 1
    assert state.player_count == 4


async def test_auto_start_opens_round_one(new_room, prompts, db, clock):
    room_code, _ = await new_room("Ana", "Ben", "Cy", "Dee")

    game = db.query(Game).filter(Game.room_code == room_code).one()
    round_obj = db.query(Round).filter(Round.game_id == game.id, Round.round_number == 1).one()
    assert game.current_phase == ANSWERING
    assert round_obj.phase == ANSWERING
    assert round_obj.prompt_id in {p.id for p in prompts}
    assert round_obj.phase_started_at.replace(tzinfo=None) == clock().replace(tzinfo=None)


async def test_start_after_auto_start_is_rejected(services, new_room, prompts):
    room_code, _ = await new_room("Ana", "Ben", "Cy", "Dee")
    with pytest.raises(AlreadyStartedError):
        await services.rooms.start(room_code)


async def test_fourth_join_without_prompts_stays_in_lobby(services, new_room, db):
    room_code, _ = await new_room("Ana", "Ben", "Cy", "Dee")

    state = await services.rooms.get_state(room_code)
    assert state.status == "lobby"
    assert state.player_count == 4
    with pytest.raises(NoPromptsError):
        await services.rooms.start(room_code)


async def test_fifth_join_is_rejected(services, new_room, prompts, db):
    room_code, _ = await new_room("Ana", "Ben", "Cy", "Dee")
    with pytest.raises(RoomFullError):
        await services.rooms.join(room_code, "Eve")
    assert db.query(Player).count() == 4


async def test_join_after_start_is_rejected(services, new_room, prompts):
    room_code, _ = await new_room("Ana")
    await services.rooms.start(room_code)
    with pytest.raises(AlreadyStartedError):
        await services.rooms.join(room_code, "Ben")


async def test_start_creates_round_and_game_phase_together(services, new_room, prompts, db, clock):
    room_code, _ = await new_room("Ana", "Ben")

    started = await services.rooms.start(room_code)

    assert started.round_number == 1
    assert started.phase == ANSWERING
    game = db.query(Game).filter(Game.room_code == room_code).one()
    round_obj = db.query(Round).filter(Round.game_id == game.id).one()
    assert (game.status, game.current_round, game.current_phase) == ("playing", 1, ANSWERING)
    assert round_obj.phase == ANSWERING
    assert game.phase_started_at == round_obj.phase_started_at


async def test_start_twice_is_rejected(services, new_room, prompts, db):
    room_code, _ = await new_room("Ana")
    await services.rooms.start(room_code)
    with pytest.raises(AlreadyStartedError):
        await services.rooms.start(room_code)
    assert db.query(Round).count() == 1


async def test_start_needs_a_player(services, new_room, prompts):
    room_code, _ = await new_room()
    with pytest.raises(InsufficientPlayersError):
        await services.rooms.start(room_code)


async def test_start_without_prompts(services, new_room, db):
    room_code, _ = await new_room("Ana")
    with pytest.raises(NoPromptsError):
        await services.rooms.start(room_code)
    game = db.query(Game).filter(Game.room_code == room_code).one()
    assert game.status == "lobby"


async def test_start_unknown_room(services, prompts):
    with pytest.raises(NotFoundError):
        await services.rooms.start("ZZZZ")


async def test_state_checks_membership(services, new_room):
    room_code, (ana,) = await new_room("Ana")
    other_room, (ben,) = await new_room("Ben")

    state = await services.rooms.get_state(room_code, ana)
    assert state.player_count == 1
    with pytest.raises(NotFoundError):
        await services.rooms.get_state(room_code, ben)


async def test_join_after_concurrent_start_is_rejected(
    services, new_room, prompts, db, clock, session_factory, concurrently, monkeypatch
):
    room_code, _ = await new_room("Ana")
    other_session = session_factory()
    real_count_players = services.rooms.store.count_players

    # Another request starts the game after this join has read the lobby
    def count_then_start(game_id):
        count = real_count_players(game_id)
        concurrently(RoomService(other_session, clock=clock).start(room_code))
        return count

    monkeypatch.setattr(services.rooms.store, "count_players", count_then_start)
    with pytest.raises(AlreadyStartedError):
        await services.rooms.join(room_code, "Ben")
    other_session.close()

    db.expire_all()
    assert db.query(Player).count() == 1
    assert db.query(Game).one().status == "playing"
