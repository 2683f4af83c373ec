"""M2-WS-01~06 room/game websocket gateway contract tests."""

from __future__ import annotations

import asyncio

from ws_fakes import connect
from ws_fakes import hang_up


def test_m2_ws_01_full_game_over_the_wire(fresh_runtime) -> None:
    """Contract: create/join/configure/start/roll/bank flow ends in a delayed settlement and winners."""

    async def scenario() -> None:
        alice, alice_task, alice_id = await connect(fresh_runtime)
        bob, bob_task, bob_id = await connect(fresh_runtime)

        await alice.say("CREATE_ROOM", {"name": "Alice"})
        created = alice.events("ROOM_CREATED")
        assert created == [{"room_code": created[0]["room_code"], "player_id": alice_id}]
        code = created[0]["room_code"]

        await bob.say("JOIN_ROOM", {"room_code": code.lower(), "name": "Bob"})
        assert [p["id"] for p in alice.last_room()["players"]] == [alice_id, bob_id]
        assert bob.last_room()["host_id"] == alice_id

        await bob.say("ADVANCE_TURN")
        assert bob.error_codes() == ["UNAUTHORIZED"]

        await alice.say("CONFIGURE_ROUNDS", {"total_rounds": 1})
        await alice.say("START_GAME")
        assert bob.last_room()["game_state"]["current_turn_index"] == 1

        await alice.say("ROLL_DICE", {"die1": 1, "die2": 1})
        assert alice.error_codes() == ["OUT_OF_TURN"]

        await bob.say("ROLL_DICE", {"die1": 2, "die2": 3})
        await alice.say("ROLL_DICE", {"die1": 4, "die2": 5})
        await bob.say("SUBMIT_PHYSICAL_DICE", {"value": 8, "is_doubles": False})
        state = alice.last_room()["game_state"]
        assert state["shared_round_score"] == 22
        assert state["roll_count"] == 3
        assert state["last_roll"] == {"die1": None, "die2": None, "total": 8}

        await alice.say("BANK")
        await bob.say("BANK")

        final = alice.last_room()
        assert final["game_state"]["status"] == "finished"
        assert final["winner_ids"] == [alice_id, bob_id]
        assert [p["locked_score"] for p in final["players"]] == [22, 22]
        assert final["settlement_pending"] is False
        assert bob.last_room() == final

        await bob.say("ROLL_DICE")
        assert bob.error_codes() == ["UNAUTHORIZED", "INVALID_STATE"]
        assert alice.error_codes() == ["OUT_OF_TURN"]

        await hang_up(alice, alice_task)
        await hang_up(bob, bob_task)

    asyncio.run(scenario())
    assert len(fresh_runtime.room_registry) == 0
    assert fresh_runtime.connections == {}


def test_m2_ws_02_unknown_code_and_started_room_are_rejected(fresh_runtime) -> None:
    """Contract: join with unknown code -> NOT_FOUND and no room created; started room -> INVALID_STATE."""

    async def scenario() -> None:
        host, host_task, _ = await connect(fresh_runtime)
        guest, guest_task, guest_id = await connect(fresh_runtime)

        await guest.say("JOIN_ROOM", {"room_code": "QQQQ", "name": "Guest"})
        assert guest.error_codes() == ["NOT_FOUND"]
        assert len(fresh_runtime.room_registry) == 0

        await host.say("CREATE_ROOM", {"name": "Host"})
        code = host.events("ROOM_CREATED")[0]["room_code"]
        await host.say("START_GAME")
        await guest.say("JOIN_ROOM", {"room_code": code, "name": "Guest"})
        assert guest.error_codes() == ["NOT_FOUND", "INVALID_STATE"]
        assert fresh_runtime.room_registry.find_room_by_player(guest_id) is None

        await guest.say("BANK")
        assert guest.error_codes()[-1] == "NOT_FOUND"

        await hang_up(host, host_task)
        await hang_up(guest, guest_task)

    asyncio.run(scenario())


def test_m2_ws_03_bad_frames_get_bad_request(fresh_runtime) -> None:
    """Contract: malformed JSON, unknown type and invalid payload -> BAD_REQUEST, socket stays open."""

    async def scenario() -> None:
        client, task, _ = await connect(fresh_runtime)

        client.push_text("{not json")
        await client.say("DANCE")
        await client.say("CREATE_ROOM", {"name": "   "})
        await client.say("CREATE_ROOM", {"name": "Solo"})

        assert client.error_codes() == ["BAD_REQUEST", "BAD_REQUEST", "BAD_REQUEST"]
        assert len(client.events("ROOM_CREATED")) == 1
        assert not task.done()

        await hang_up(client, task)

    asyncio.run(scenario())


def test_m2_ws_04_heartbeat_frames_are_handled_by_the_loop(fresh_runtime) -> None:
    """Contract: server pings on connect, client PING gets PONG, PONG is swallowed."""

    async def scenario() -> None:
        client, task, _ = await connect(fresh_runtime)

        client.push_text("PING")
        await client.say("PONG")

        assert client.events("PING") == [{}]
        assert client.events("PONG") == [{}]
        assert client.error_codes() == []

        await hang_up(client, task)

    asyncio.run(scenario())


def test_m2_ws_05_host_disconnect_reassigns_host_and_broadcasts(fresh_runtime) -> None:
    """Contract: host leaves -> remaining members get new host; last leaver deletes the room."""

    async def scenario() -> None:
        host, host_task, _ = await connect(fresh_runtime)
        second, second_task, second_id = await connect(fresh_runtime)
        third, third_task, third_id = await connect(fresh_runtime)

        await host.say("CREATE_ROOM", {"name": "Host"})
        code = host.events("ROOM_CREATED")[0]["room_code"]
        await second.say("JOIN_ROOM", {"room_code": code, "name": "Second"})
        await third.say("JOIN_ROOM", {"room_code": code, "name": "Third"})

        await hang_up(host, host_task)
        room = third.last_room()
        assert room["host_id"] == second_id
        assert [p["id"] for p in room["players"]] == [second_id, third_id]

        await third.say("START_GAME")
        assert third.error_codes() == ["UNAUTHORIZED"]
        await second.say("START_GAME")
        assert third.last_room()["game_state"]["status"] == "playing"

        await hang_up(second, second_task)
        assert third.last_room()["host_id"] == third_id
        await hang_up(third, third_task)

    asyncio.run(scenario())
    assert len(fresh_runtime.room_registry) == 0


def test_m2_ws_06_undo_and_disconnect_driven_settlement(fresh_runtime) -> None:
    """Contract: host undo restores state; last unbanked player leaving triggers delayed settlement."""

    async def scenario() -> None:
        host, host_task, host_id = await connect(fresh_runtime)
        guest, guest_task, guest_id = await connect(fresh_runtime)

        await host.say("CREATE_ROOM", {"name": "Host"})
        await host.say("UNDO")
        assert host.error_codes() == ["INVALID_STATE"]

        code = host.events("ROOM_CREATED")[0]["room_code"]
        await guest.say("JOIN_ROOM", {"room_code": code, "name": "Guest"})
        await host.say("CONFIGURE_ROUNDS", {"total_rounds": 2})
        await host.say("START_GAME")
        started = host.last_room()

        await guest.say("ROLL_DICE", {"die1": 6, "die2": 6})
        assert host.last_room()["game_state"]["shared_round_score"] == 12
        await guest.say("UNDO")
        assert guest.error_codes() == ["UNAUTHORIZED"]
        await host.say("UNDO")
        assert guest.last_room() == started

        await guest.say("ROLL_DICE", {"die1": 2, "die2": 3})
        await host.say("ROLL_DICE", {"die1": 4, "die2": 5})
        await guest.say("ROLL_DICE", {"die1": 3, "die2": 5})
        await host.say("BANK")
        assert host.last_room()["players"][0]["locked_score"] == 22

        await hang_up(guest, guest_task)
        room = host.last_room()
        assert [p["id"] for p in room["players"]] == [host_id]
        assert room["game_state"]["current_round"] == 2
        assert room["game_state"]["round_active"] is True
        assert fresh_runtime.room_registry.find_room_by_player(guest_id) is None

        await hang_up(host, host_task)

    asyncio.run(scenario())
