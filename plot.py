"""Summarise and chart a leaderboard data file.

Usage: python plot.py [path/to/leaderboard.json]
"""
import json
import sys
from pathlib import Path

import numpy as np


def load_entries(path):
    with Path(path).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return [entry for entry in payload if isinstance(entry, dict)] if isinstance(payload, list) else []


def summarize(entries):
    """Score/move statistics for a list of leaderboard records."""
    if not entries:
        return {"count": 0, "mean_score": 0.0, "median_score": 0.0, "max_score": 0, "points_per_move": 0.0}
    scores = np.array([e.get("score", 0) for e in entries], dtype=float)
    moves = np.array([e.get("moves", 0) for e in entries], dtype=float)
    total_moves = moves.sum()
    return {
        "count": len(entries),
        "mean_score": float(scores.mean()),
        "median_score": float(np.median(scores)),
        "max_score": int(scores.max()),
        "points_per_move": float(scores.sum() / total_moves) if total_moves > 0 else 0.0,
    }


def plot_entries(entries):
    import matplotlib.pyplot as plt

    scores = np.array([e.get("score", 0) for e in entries], dtype=float)
    moves = np.array([e.get("moves", 0) for e in entries], dtype=float)

    fig, (left, right) = plt.subplots(1, 2, figsize=(11, 4))
    left.hist(scores, bins=min(30, max(1, len(entries))), color="tab:orange")
    left.set_xlabel("Score")
    left.set_ylabel("Sessions")
    left.set_title("Score distribution")
    right.scatter(moves, scores, s=12, alpha=0.6)
    if len(entries) > 1 and np.ptp(moves) > 0:
        slope, intercept = np.polyfit(moves, scores, 1)
        xs = np.linspace(moves.min(), moves.max(), 100)
        right.plot(xs, slope * xs + intercept, color="gray", linestyle="--", label=f"{slope:.1f} pts/move")
        right.legend()
    right.set_xlabel("Moves")
    right.set_ylabel("Score")
    right.set_title("Score vs. moves")
    right.grid(True)
    fig.tight_layout()
    plt.show()


if __name__ == "__main__":
    source = sys.argv[1] if len(sys.argv) > 1 else "data/leaderboard.json"
    data = load_entries(source)
    for key, value in summarize(data).items():
        print(f"{key:>16}: {value}")
    if data:
        plot_entries(data)
