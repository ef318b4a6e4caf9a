import argparse
import json
import logging

from jankenbrain.backtest import load_records, sweep


def run_backtest(data_path: str, top: int = 10, seed: int = 0):
    # data format: list of {hand, result, createdAt|timestamp, date?}
    records = load_records(data_path)
    results = sweep(records, seed=seed)

    print(f"Top {min(top, len(results))} configurations:")
    for i, r in enumerate(results[:top]):
        o = r.options
        print(
            f"{i + 1}. score={r.score:.2f}  lambda={o.recency_decay_rate}  "
            f"alpha={o.expected_vs_winrate_blend}  eps={o.exploration_probability}"
        )
    print(json.dumps({"records": len(records), "configurations": len(results)}, indent=2))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rank recommender options by replaying a play log")
    parser.add_argument("records", help="JSON file with a list of play records")
    parser.add_argument("--top", type=int, default=10)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="[%(levelname)s] %(message)s")
    run_backtest(args.records, top=args.top, seed=args.seed)
