"""
Tests for the round state machine.

Covers draw, pick arbitration, lock broadcast and reveal sequencing,
including concurrent picks and reveal timers left over from a restarted
round.
"""

import asyncio

import pytest

from arena.game import ConfigurationError, PickRejection, RoundPhase


pytestmark = pytest.mark.anyio


async def settle():
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(5):
        await asyncio.sleep(0)


class TestStartRound:

    async def test_draws_one_distinct_card_per_slot(self, controller, transport):
        view = await controller.start_round()

        drawn = transport.of_type("cards_drawn")
        assert len(drawn) == 1
        assert len(drawn[0]["card_ids"]) == 3
        assert len(set(drawn[0]["card_ids"])) == 3
        assert drawn[0]["card_ids"] == view.card_ids
        assert view.phase == RoundPhase.PICKING
        assert view.owners == [None, None, None]

    async def test_round_started_precedes_cards_drawn(self, controller, transport):
        await controller.start_round()
        assert transport.types() == ["round_started", "cards_drawn"]
        assert transport.broadcasts[0]["required_pickers"] == 2

    async def test_restart_before_any_pick_resets_everything(self, controller, transport):
        first = await controller.start_round()
        second = await controller.start_round()

        assert second.round_number == first.round_number + 1
        assert second.phase == RoundPhase.PICKING
        assert second.picked_count == 0
        assert second.owners == [None, None, None]
        assert len(transport.of_type("cards_drawn")) == 2

    async def test_restart_clears_locks_and_picks(self, controller, registry):
        await controller.start_round()
        await controller.submit_pick("p1", 0)

        view = await controller.start_round()

        assert view.picked_count == 0
        assert not any(view.locked)
        assert not registry.has_picked("p1")
        result = await controller.submit_pick("p1", 0)
        assert result.accepted

    async def test_phase_is_idle_before_first_round(self, controller):
        assert controller.phase == RoundPhase.IDLE
        result = await controller.submit_pick("p1", 0)
        assert result.reason == PickRejection.NOT_PICKING


class TestRequiredPickers:

    def test_two_seat_minimum(self, make_controller):
        controller = make_controller()
        assert controller.resolve_required_pickers(0) == 2
        assert controller.resolve_required_pickers(1) == 2
        assert controller.resolve_required_pickers(2) == 2
        assert controller.resolve_required_pickers(4) == 4

    def test_solo_flag_only_applies_to_a_single_player(self, make_controller):
        controller = make_controller(allow_solo=True)
        assert controller.resolve_required_pickers(1) == 1
        assert controller.resolve_required_pickers(3) == 3

    def test_explicit_override(self, make_controller):
        controller = make_controller(required_pickers=3)
        assert controller.resolve_required_pickers(2) == 3


class TestConfiguration:

    def test_zero_slots_refused(self, make_controller):
        with pytest.raises(ConfigurationError):
            make_controller(slot_count=0)

    def test_more_slots_than_catalog_refused(self, make_controller, catalog):
        with pytest.raises(ConfigurationError):
            make_controller(slot_count=len(catalog) + 1)

    async def test_whole_catalog_can_be_dealt(self, make_controller, catalog, transport):
        controller = make_controller(slot_count=len(catalog))
        await controller.start_round()
        card_ids = transport.of_type("cards_drawn")[0]["card_ids"]
        assert sorted(card_ids) == list(range(len(catalog)))


class TestSubmitPick:

    async def test_scenario_two_players_contest_a_slot(self, controller, transport, sleeper):
        view = await controller.start_round()

        first = await controller.submit_pick("p1", 0)
        assert first.accepted
        assert first.card_id == view.card_ids[0]
        assert not first.reveal_scheduled
        assert controller.snapshot().picked_count == 1
        assert transport.of_type("slot_locked")[-1] == {
            "type": "slot_locked", "round": 1, "slot": 0, "owner": "p1",
        }

        contested = await controller.submit_pick("p2", 0)
        assert not contested.accepted
        assert contested.reason == PickRejection.SLOT_TAKEN

        second = await controller.submit_pick("p2", 1)
        assert second.accepted
        assert second.reveal_scheduled
        assert controller.phase == RoundPhase.AWAITING_REVEAL

        await settle()
        assert transport.of_type("reveal_ready") == []
        assert sleeper.delays == [5.0]

        sleeper.release()
        await controller.reveal_task

        reveal = transport.of_type("reveal_ready")
        assert len(reveal) == 1
        assert reveal[0]["entries"] == [
            {"slot": 0, "owner": "p1", "card_id": view.card_ids[0]},
            {"slot": 1, "owner": "p2", "card_id": view.card_ids[1]},
        ]
        assert reveal[0]["hidden"] == [2]
        assert controller.phase == RoundPhase.REVEALED

    async def test_scenario_lone_player_never_reveals(self, make_controller, registry, transport):
        registry.remove_player("p2")
        controller = make_controller()
        view = await controller.start_round()
        assert view.required_pickers == 2

        result = await controller.submit_pick("p1", 2)

        assert result.accepted
        assert not result.reveal_scheduled
        assert controller.reveal_task is None
        assert controller.phase == RoundPhase.PICKING
        again = await controller.submit_pick("p1", 0)
        assert again.reason == PickRejection.ALREADY_PICKED

    async def test_solo_mode_reveals_a_single_pick(self, make_controller, registry, transport, sleeper):
        registry.remove_player("p2")
        controller = make_controller(allow_solo=True, reveal_delay_seconds=0)
        await controller.start_round()

        result = await controller.submit_pick("p1", 1)
        assert result.reveal_scheduled

        sleeper.release()
        await controller.reveal_task
        assert sleeper.delays == [0]
        assert len(transport.of_type("reveal_ready")) == 1

    async def test_scenario_resubmitting_same_slot(self, controller, transport):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        broadcasts_before = len(transport.broadcasts)

        again = await controller.submit_pick("p1", 0)

        assert again.reason == PickRejection.ALREADY_PICKED
        assert controller.snapshot().picked_count == 1
        assert len(transport.broadcasts) == broadcasts_before

    async def test_second_pick_on_another_slot_is_already_picked(self, controller):
        await controller.start_round()
        await controller.submit_pick("p1", 0)

        again = await controller.submit_pick("p1", 1)

        assert again.reason == PickRejection.ALREADY_PICKED
        assert controller.snapshot().owners == ["p1", None, None]

    @pytest.mark.parametrize("slot", [-1, 3, 99])
    async def test_out_of_range_slot(self, controller, slot):
        await controller.start_round()
        result = await controller.submit_pick("p1", slot)
        assert result.reason == PickRejection.SLOT_OUT_OF_RANGE

    async def test_unknown_player_rejected(self, controller, transport):
        await controller.start_round()
        result = await controller.submit_pick("stranger", 0)
        assert result.reason == PickRejection.UNKNOWN_PLAYER
        assert transport.of_type("slot_locked") == []

    async def test_reconnected_player_cannot_pick_twice(self, controller, registry):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        registry.remove_player("p1")
        registry.add_player("p1")

        result = await controller.submit_pick("p1", 1)

        assert result.reason == PickRejection.ALREADY_PICKED

    async def test_picks_after_reveal_trigger_are_rejected(self, controller, sleeper):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        await controller.submit_pick("p2", 1)

        late = await controller.submit_pick("p1", 2)
        assert late.reason == PickRejection.NOT_PICKING

        sleeper.release()
        await controller.reveal_task
        after = await controller.submit_pick("p2", 2)
        assert after.reason == PickRejection.NOT_PICKING

    async def test_card_face_goes_only_to_owner(self, controller, transport):
        view = await controller.start_round()
        await controller.submit_pick("p1", 2)

        assert "p2" not in transport.private
        (picked,) = transport.private["p1"]
        assert picked["type"] == "card_picked"
        assert picked["card_id"] == view.card_ids[2]
        assert "card_id" not in transport.of_type("slot_locked")[0]

    async def test_effect_delivered_when_pick_accepted(self, controller, catalog, effects):
        view = await controller.start_round()
        await controller.submit_pick("p2", 1)

        (outcome,) = effects
        card = catalog[view.card_ids[1]]
        assert outcome.acting_player == "p2"
        assert outcome.effect_kind == card.effect_kind
        assert outcome.magnitude == card.magnitude

    async def test_rejected_picks_produce_no_effect(self, controller, effects):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        await controller.submit_pick("p2", 0)
        assert len(effects) == 1


class TestConcurrency:

    async def test_race_for_one_slot_has_one_winner(self, controller, transport):
        await controller.start_round()

        results = await asyncio.gather(
            controller.submit_pick("p1", 1),
            controller.submit_pick("p2", 1),
        )

        accepted = [r for r in results if r.accepted]
        rejected = [r for r in results if not r.accepted]
        assert len(accepted) == 1
        assert len(rejected) == 1
        assert rejected[0].reason == PickRejection.SLOT_TAKEN
        assert len(transport.of_type("slot_locked")) == 1
        # first processed wins
        assert controller.snapshot().owners[1] == "p1"

    async def test_many_players_each_lock_at_most_once(self, make_controller, registry, transport, sleeper):
        for name in ("p3", "p4"):
            registry.add_player(name)
        controller = make_controller(slot_count=4)
        await controller.start_round()

        picks = [
            controller.submit_pick(player, slot)
            for player in ("p1", "p2", "p3", "p4")
            for slot in range(4)
        ]
        await asyncio.gather(*picks)

        locks = transport.of_type("slot_locked")
        assert len(locks) == 4
        assert len({lock["owner"] for lock in locks}) == 4
        assert len({lock["slot"] for lock in locks}) == 4
        assert controller.phase == RoundPhase.AWAITING_REVEAL

        sleeper.release()
        await controller.reveal_task
        assert len(transport.of_type("reveal_ready")) == 1

    async def test_slow_private_delivery_does_not_block_other_picks(
        self, controller, transport, monkeypatch
    ):
        gate = asyncio.Event()
        record = transport.send_to

        async def gated_send_to(player_id, message):
            if player_id == "p1":
                await gate.wait()
            await record(player_id, message)

        monkeypatch.setattr(transport, "send_to", gated_send_to)
        await controller.start_round()

        slow = asyncio.create_task(controller.submit_pick("p1", 0))
        await settle()
        assert transport.of_type("slot_locked")[0]["owner"] == "p1"

        other = await asyncio.wait_for(controller.submit_pick("p2", 1), timeout=0.5)
        assert other.accepted
        assert not slow.done()

        gate.set()
        first = await slow
        assert first.accepted
        assert transport.private["p1"][0]["type"] == "card_picked"
        controller.close()

    async def test_events_are_broadcast_in_round_order(self, controller, transport, sleeper):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        await controller.submit_pick("p2", 2)
        sleeper.release()
        await controller.reveal_task

        assert transport.types() == [
            "round_started", "cards_drawn", "slot_locked", "slot_locked", "reveal_ready",
        ]


class TestRevealTimer:

    async def test_restart_cancels_pending_reveal(self, controller, transport, sleeper):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        await controller.submit_pick("p2", 1)
        pending = controller.reveal_task

        await controller.start_round()
        sleeper.release()
        await settle()

        assert pending.cancelled()
        assert transport.of_type("reveal_ready") == []
        assert controller.phase == RoundPhase.PICKING

    async def test_stale_timer_is_ignored(self, controller, transport, sleeper):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        await controller.submit_pick("p2", 1)
        await controller.start_round()
        sleeper.release()

        # a timer from round 1 that slipped past cancellation
        await controller._reveal_after(1)

        assert transport.of_type("reveal_ready") == []
        assert controller.round_number == 2
        assert controller.phase == RoundPhase.PICKING

    async def test_reveal_fires_at_most_once(self, controller, transport, sleeper):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        await controller.submit_pick("p2", 1)
        sleeper.release()
        await controller.reveal_task

        await controller._reveal_after(controller.round_number)

        assert len(transport.of_type("reveal_ready")) == 1

    async def test_close_cancels_pending_reveal(self, controller, sleeper):
        await controller.start_round()
        await controller.submit_pick("p1", 0)
        await controller.submit_pick("p2", 1)
        pending = controller.reveal_task

        controller.close()
        await settle()

        assert pending.cancelled()
        assert controller.reveal_task is None
