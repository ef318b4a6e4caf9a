import math
import random

import numpy as np
import pytest

from jankenbrain import (
    Distribution,
    Hand,
    JankenBrain,
    Options,
    OptionsError,
    Outcome,
    estimate_opponent_distribution,
    recommend,
    recommend_from_distribution,
)
from jankenbrain.core import best_hand, expected_scores, win_rates

from conftest import NOW_MS, SequenceRandom, make_record


def test_scenario_rock_streak(rock_streak, no_explore):
    rec = recommend(rock_streak, no_explore, rng=random.Random(0), now_ms=NOW_MS)
    assert rec.hand is Hand.ROCK
    assert rec.mode == "exploit"
    assert win_rates(rock_streak).tolist() == [1.0, 0.0, 0.0]
    assert rec.win_rate_score_per_hand == {Hand.ROCK: 40.0, Hand.SCISSORS: 0.0, Hand.PAPER: 0.0}
    # transition row rock: [1 + 9, 1, 1]
    assert math.isclose(rec.opponent_distribution[Hand.ROCK], 10 / 12)


def test_scenario_empty_history(no_explore):
    rec = recommend([], no_explore, rng=random.Random(0), now_ms=NOW_MS)
    assert rec.hand is Hand.ROCK
    assert rec.mode == "exploit"
    e = list(rec.expected_score_per_hand.values())
    assert all(math.isclose(v, 70 / 3) for v in e)
    assert set(rec.win_rate_score_per_hand.values()) == {0.0}
    for h, c in rec.combined_score_per_hand.items():
        assert math.isclose(c, 0.7 * rec.expected_score_per_hand[h])


def test_determinism_without_exploration(no_explore):
    h = [
        make_record(Hand.PAPER, Outcome.WIN, days_ago=3),
        make_record(Hand.ROCK, Outcome.LOSS, days_ago=2),
        make_record(Hand.SCISSORS, Outcome.DRAW, days_ago=1),
        make_record(Hand.PAPER, Outcome.WIN, days_ago=0),
    ]
    a = recommend(h, no_explore, rng=random.Random(1), now_ms=NOW_MS)
    b = recommend(h, no_explore, rng=random.Random(2), now_ms=NOW_MS)
    assert a == b
    assert a.to_dict() == b.to_dict()
    assert a.mode == "exploit"


def test_tie_break_prefers_play_count_then_canonical_order():
    uniform = Distribution.uniform()
    opts = Options(exploration_probability=0.0)
    # no wins anywhere: combined and expected tie on all hands
    h = [
        make_record(Hand.ROCK, Outcome.LOSS, days_ago=3),
        make_record(Hand.SCISSORS, Outcome.LOSS, days_ago=2),
        make_record(Hand.SCISSORS, Outcome.DRAW, days_ago=1),
    ]
    assert recommend_from_distribution(h, uniform, opts, rng=random.Random(0)).hand is Hand.SCISSORS

    h2 = [make_record(Hand.SCISSORS, Outcome.LOSS, days_ago=1), make_record(Hand.PAPER, Outcome.LOSS)]
    assert recommend_from_distribution(h2, uniform, opts, rng=random.Random(0)).hand is Hand.SCISSORS


def test_tie_break_expected_before_play_count():
    combined = np.array([10.0, 10.0, 5.0])
    expected = np.array([20.0, 25.0, 30.0])
    plays = np.array([9.0, 0.0, 0.0])
    assert best_hand(combined, expected, plays) is Hand.SCISSORS


def test_expected_scores_against_certain_opponent():
    d = Distribution(np.array([1.0, 0.0, 0.0]))  # opponent always rock
    e = expected_scores(d)
    assert e[Hand.PAPER.index] == 40.0
    assert e[Hand.ROCK.index] == 20.0
    assert e[Hand.SCISSORS.index] == 10.0


def test_blend_extremes():
    h = [make_record(Hand.SCISSORS, Outcome.WIN)]
    d = Distribution(np.array([1.0, 0.0, 0.0]))
    only_ev = recommend_from_distribution(h, d, Options(expected_vs_winrate_blend=1.0, exploration_probability=0), rng=random.Random(0))
    only_wr = recommend_from_distribution(h, d, Options(expected_vs_winrate_blend=0.0, exploration_probability=0), rng=random.Random(0))
    assert only_ev.hand is Hand.PAPER
    assert only_wr.hand is Hand.SCISSORS


def test_final_exploration_picks_uniform_hand():
    opts = Options(exploration_probability=0.5)
    # draw 0.0 explores, then 0.7 -> index 2
    rec = recommend_from_distribution([], Distribution.uniform(), opts, rng=SequenceRandom([0.0, 0.7]))
    assert rec.mode == "explore"
    assert rec.hand is Hand.PAPER
    rec = recommend_from_distribution([], Distribution.uniform(), opts, rng=SequenceRandom([0.0, 0.34]))
    assert rec.hand is Hand.SCISSORS


def test_opponent_side_exploration_returns_uniform(rock_streak):
    opts = Options(exploration_probability=0.5)
    d = estimate_opponent_distribution(rock_streak, opts, rng=SequenceRandom([0.1]), now_ms=NOW_MS)
    assert d == Distribution.uniform()
    d2 = estimate_opponent_distribution(rock_streak, opts, rng=SequenceRandom([0.9]), now_ms=NOW_MS)
    assert d2[Hand.ROCK] > 0.5


def test_two_independent_exploration_draws(rock_streak):
    opts = Options(exploration_probability=0.5)
    # opponent stage explores (0.1), hand stage exploits (0.9)
    rng = SequenceRandom([0.1, 0.9])
    rec = recommend(rock_streak, opts, rng=rng, now_ms=NOW_MS)
    assert rec.opponent_distribution == Distribution.uniform()
    assert rec.mode == "exploit"
    assert rng.calls == 2


def test_exploration_probability_one_always_explores(rock_streak):
    rec = recommend(rock_streak, Options(exploration_probability=1.0), rng=random.Random(3), now_ms=NOW_MS)
    assert rec.mode == "explore"


def test_never_raises_with_unknown_hands(no_explore):
    h = [make_record(None, None, days_ago=2), make_record(None, Outcome.WIN, days_ago=1), make_record(None)]
    rec = recommend(h, no_explore, rng=random.Random(0), now_ms=NOW_MS)
    assert rec.hand is Hand.ROCK
    assert all(np.isfinite(v) for v in rec.combined_score_per_hand.values())


def test_zero_laplace_empty_history_has_no_nan(no_explore):
    rec = recommend([], Options(laplace_alpha=0.0, exploration_probability=0.0), rng=random.Random(0), now_ms=NOW_MS)
    assert all(np.isfinite(v) for v in rec.opponent_distribution.values())


def test_recommendation_to_dict(rock_streak, no_explore):
    out = recommend(rock_streak, no_explore, rng=random.Random(0), now_ms=NOW_MS).to_dict()
    assert out["hand"] == "rock"
    r = out["rationale"]
    assert r["mode"] == "exploit"
    assert set(r) == {"mode", "opponentDistribution", "expectedScorePerHand", "winRateScorePerHand", "combinedScorePerHand"}
    assert set(r["opponentDistribution"]) == {"rock", "scissors", "paper"}


def test_brain_uses_injected_clock_and_rng(rock_streak):
    brain = JankenBrain(options=Options(exploration_probability=0.0), rng=SequenceRandom([0.5]), clock=lambda: NOW_MS)
    rec = brain.recommend(rock_streak)
    assert rec.hand is Hand.ROCK
    dist, meta = brain.predict(rock_streak)
    assert meta == {"estimator": "transition", "explored": False, "history_length": 10}
    dist2, meta2 = brain.predict(rock_streak[:2])
    assert meta2["estimator"] == "recency"


def test_brain_overrides_are_validated(rock_streak):
    brain = JankenBrain(random_seed=1, clock=lambda: NOW_MS)
    rec = brain.recommend(rock_streak, {"explorationProbability": 0})
    assert rec.mode == "exploit"
    with pytest.raises(OptionsError):
        brain.recommend(rock_streak, {"explorationProbability": 2})


def test_seeded_brains_agree(rock_streak):
    a = JankenBrain(random_seed=7, clock=lambda: NOW_MS)
    b = JankenBrain(random_seed=7, clock=lambda: NOW_MS)
    assert [a.recommend(rock_streak).hand for _ in range(20)] == [b.recommend(rock_streak).hand for _ in range(20)]
