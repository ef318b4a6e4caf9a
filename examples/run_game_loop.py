import random
import time

from jankenbrain import HANDS, JankenBrain, Record, payoff
from jankenbrain.records import date_of
from jankenbrain.utils import outcome_of

DAY_MS = 24 * 60 * 60 * 1000


def play_round(brain: JankenBrain, history, opponent_rng: random.Random, ts: int):
    rec = brain.recommend(history)
    # Simulated opponent: sticky, repeats Rock 60% of the time
    opp = HANDS[0] if opponent_rng.random() < 0.6 else opponent_rng.choice(HANDS)
    result = outcome_of(rec.hand, opp)
    history.append(Record(hand=rec.hand, result=result, timestamp=ts, calendar_date=date_of(ts)))
    return rec, opp, result


def main():
    brain = JankenBrain(random_seed=42)
    opponent_rng = random.Random(7)
    history = []
    start = int(time.time() * 1000) - 20 * DAY_MS
    total = 0
    for i in range(20):
        rec, opp, result = play_round(brain, history, opponent_rng, start + i * DAY_MS)
        total += payoff(rec.hand, opp)
        print(f"Round {i+1}: played={rec.hand.value} opp={opp.value} result={result.value} mode={rec.mode}")
    stats = brain.statistics(history)
    print(f"avg score={total / 20:.2f} baseline={stats.expected_baseline:.2f}")


if __name__ == "__main__":
    main()
