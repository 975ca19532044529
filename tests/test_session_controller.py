import pytest

from coach_models import (
    ArsenalSessionResult,
    BellReason,
    BellRing,
    ComboPhase,
    Difficulty,
    DrillSessionResult,
    Intensity,
    SessionComplete,
    SessionMode,
    SessionPhase,
    SessionSnapshot,
    SpeakCombo,
)
from session_config import SessionConfig
from session_controller import AUTO_CLOSE_DELAY_SECONDS, GET_READY_SECONDS, SessionController


def _training(rounds: int = 2, round_seconds: int = 10, rest_seconds: int = 5, **kwargs) -> SessionConfig:
    return SessionConfig.training(
        rounds=rounds,
        round_duration_seconds=round_seconds,
        rest_duration_seconds=rest_seconds,
        difficulty=kwargs.get("difficulty", Difficulty.BEGINNER),
        intensity=kwargs.get("intensity", Intensity.MEDIUM),
    )


def _arsenal(level: int = 2) -> SessionConfig:
    return SessionConfig.add_to_arsenal(
        target_move_code="B",
        allowed_move_codes=["1", "2", "A", "B"],
        difficulty=Difficulty.BEGINNER,
        academy_level=level,
    )


def _run_to_completion(controller: SessionController, limit: int = 10_000):
    all_events = list(controller.start())
    ticks = 0
    while controller.phase != SessionPhase.COMPLETE and ticks < limit:
        all_events.extend(controller.tick())
        ticks += 1
    return ticks, all_events


def test_two_round_training_completes_after_twenty_five_ticks() -> None:
    controller = SessionController(_training(), seed=1)
    controller.start()
    for tick_number in range(1, 26):
        controller.tick()
        if tick_number < 25:
            assert controller.phase != SessionPhase.COMPLETE
    assert controller.phase == SessionPhase.COMPLETE
    assert controller.current_round == 2


@pytest.mark.parametrize(
    ("rounds", "round_seconds", "rest_seconds"),
    [(1, 1, 0), (1, 30, 10), (3, 7, 0), (3, 20, 4), (5, 12, 1)],
)
def test_completion_after_all_rounds_and_rests(rounds: int, round_seconds: int, rest_seconds: int) -> None:
    controller = SessionController(_training(rounds, round_seconds, rest_seconds), seed=rounds)
    ticks, _ = _run_to_completion(controller)
    assert ticks == rounds * round_seconds + (rounds - 1) * rest_seconds
    assert controller.current_round == rounds


@pytest.mark.parametrize("level", [1, 2, 4])
def test_arsenal_completion_time_matches_level_plan(level: int) -> None:
    config = _arsenal(level)
    controller = SessionController(config, seed=level)
    ticks, _ = _run_to_completion(controller)
    assert ticks == config.total_seconds


def test_snapshot_every_tick_and_combo_phase_never_negative() -> None:
    controller = SessionController(_training(rounds=3, round_seconds=40, rest_seconds=5), seed=3)
    controller.start()
    while controller.phase != SessionPhase.COMPLETE:
        events = controller.tick()
        snapshots = [event for event in events if isinstance(event, SessionSnapshot)]
        assert len(snapshots) == 1
        assert events[-1] is snapshots[0]
        assert snapshots[0].combo_phase_remaining_seconds >= 0.0


def test_speak_combo_once_per_sequence_id_and_only_in_rounds() -> None:
    controller = SessionController(_training(rounds=3, round_seconds=60, rest_seconds=10), seed=8)
    events = controller.start()
    spoken_ids = [event.sequence_id for event in events if isinstance(event, SpeakCombo)]
    assert spoken_ids == [1]

    while controller.phase != SessionPhase.COMPLETE:
        events = controller.tick()
        spoken = [event for event in events if isinstance(event, SpeakCombo)]
        if spoken:
            assert events[-1].phase == SessionPhase.ROUND
        spoken_ids.extend(event.sequence_id for event in spoken)

    assert spoken_ids == list(range(1, len(spoken_ids) + 1))
    assert len(spoken_ids) >= 6


def test_training_rings_no_bells_and_completes_without_auto_close() -> None:
    _, events = _run_to_completion(SessionController(_training(), seed=2))
    assert not any(isinstance(event, BellRing) for event in events)
    completions = [event for event in events if isinstance(event, SessionComplete)]
    assert completions == [SessionComplete(mode=SessionMode.TRAINING, auto_close_after_seconds=None)]


def test_drill_get_ready_delay_before_first_combo() -> None:
    controller = SessionController(SessionConfig.drill(move_code="1", difficulty=Difficulty.BEGINNER), seed=4)
    opening = controller.start()
    assert opening[0] == BellRing(reason=BellReason.ROUND_START)
    assert controller.get_ready_remaining_seconds == GET_READY_SECONDS
    assert controller.combo_phase == ComboPhase.IDLE

    for _ in range(GET_READY_SECONDS - 1):
        assert not any(isinstance(event, SpeakCombo) for event in controller.tick())
    events = controller.tick()
    spoken = [event for event in events if isinstance(event, SpeakCombo)]
    assert len(spoken) == 1 and spoken[0].sequence_id == 1
    assert set(spoken[0].move_codes) == {"1"}
    assert controller.combo_phase == ComboPhase.ANNOUNCE


def test_arsenal_bells_and_auto_close() -> None:
    controller = SessionController(_arsenal(level=2), seed=6)
    _, events = _run_to_completion(controller)
    bells = [event.reason for event in events if isinstance(event, BellRing)]
    assert bells == [BellReason.ROUND_START, BellReason.ROUND_END, BellReason.ROUND_START, BellReason.ROUND_END]
    assert events[-2] == SessionComplete(
        mode=SessionMode.ADD_TO_ARSENAL, auto_close_after_seconds=AUTO_CLOSE_DELAY_SECONDS
    )
    assert controller.end(completed=True) == ArsenalSessionResult(completed=True)


def test_arsenal_combos_include_target() -> None:
    controller = SessionController(_arsenal(level=1), seed=9)
    _, events = _run_to_completion(controller)
    spoken = [event for event in events if isinstance(event, SpeakCombo)]
    assert spoken
    assert all("B" in event.move_codes for event in spoken)


def test_pause_freezes_time_and_resume_continues() -> None:
    controller = SessionController(_training(rounds=1, round_seconds=30, rest_seconds=0), seed=5)
    controller.start()
    controller.tick()
    before = controller.snapshot()

    paused = controller.pause()
    assert len(paused) == 1 and paused[0].is_paused
    for _ in range(10):
        assert controller.tick() == []
    assert controller.remaining_seconds == before.remaining_seconds
    assert controller.pause() == []

    resumed = controller.resume()
    assert len(resumed) == 1 and not resumed[0].is_paused
    assert not any(isinstance(event, SpeakCombo) for event in resumed)
    controller.tick()
    assert controller.remaining_seconds == before.remaining_seconds - 1


def test_toggle_pause() -> None:
    controller = SessionController(_training(), seed=5)
    controller.start()
    controller.toggle_pause()
    assert controller.is_paused
    controller.toggle_pause()
    assert not controller.is_paused


def test_end_returns_mode_result_and_ignores_later_ticks() -> None:
    training = SessionController(_training(), seed=1)
    training.start()
    assert training.end() is None
    assert training.tick() == []

    drill = SessionController(SessionConfig.drill(move_code="A", difficulty=Difficulty.BEGINNER), seed=1)
    drill.start()
    drill.tick()
    assert drill.end(completed=False) == DrillSessionResult(completed=False)
    assert drill.tick() == []
    assert drill.current_combo is None


def test_tick_without_start_starts_the_session() -> None:
    controller = SessionController(_training(), seed=1)
    events = controller.tick()
    assert any(isinstance(event, SpeakCombo) for event in events)
    assert controller.remaining_seconds == 9


def test_same_seed_reproduces_the_same_session() -> None:
    first = _run_to_completion(SessionController(_training(rounds=2, round_seconds=60), seed=42))[1]
    second = _run_to_completion(SessionController(_training(rounds=2, round_seconds=60), seed=42))[1]
    assert [event for event in first if isinstance(event, SpeakCombo)] == [
        event for event in second if isinstance(event, SpeakCombo)
    ]


def test_rejects_non_config() -> None:
    with pytest.raises(TypeError):
        SessionController({"rounds": 1})


def _two_round_narrow_training() -> SessionConfig:
    return SessionConfig.training(
        rounds=2,
        round_duration_seconds=12,
        rest_duration_seconds=2,
        difficulty=Difficulty.BEGINNER,
        intensity=Intensity.MEDIUM,
        allowed_move_codes=["1", "2"],
    )


def _last_round_one_and_first_round_two_combos(controller: SessionController):
    last_round_one = None
    for event in controller.start():
        if isinstance(event, SpeakCombo):
            last_round_one = event
    while controller.phase == SessionPhase.ROUND:
        for event in controller.tick():
            if isinstance(event, SpeakCombo) and controller.current_round == 1:
                last_round_one = event
    assert controller.phase == SessionPhase.REST
    previous_during_rest = controller.previous_combo

    while True:
        for event in controller.tick():
            if isinstance(event, SpeakCombo):
                return last_round_one, previous_during_rest, event


def test_previous_combo_survives_rest_between_rounds() -> None:
    controller = SessionController(_two_round_narrow_training(), seed=4)
    last_round_one, previous_during_rest, _ = _last_round_one_and_first_round_two_combos(controller)
    assert last_round_one is not None
    assert previous_during_rest is not None
    assert previous_during_rest.move_codes == last_round_one.move_codes
    assert previous_during_rest.sequence_id == last_round_one.sequence_id


def test_first_combo_of_next_round_avoids_last_combo_of_previous_round() -> None:
    for seed in range(30):
        controller = SessionController(_two_round_narrow_training(), seed=seed)
        last_round_one, _, first_round_two = _last_round_one_and_first_round_two_combos(controller)
        assert first_round_two.move_codes != last_round_one.move_codes, seed
