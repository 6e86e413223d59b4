"""
Command line entry point

    python -m deffdred                    # play in the terminal
    python -m deffdred --headless         # random-policy episode, no window
"""

import argparse

from .config import LEADERBOARD_CONFIG, PATTERN_PATH
from .shooter_env import run_random_episode


def main():
    parser = argparse.ArgumentParser(description="DeffDred terminal shooter")
    parser.add_argument(
        "--pattern",
        type=str,
        default=PATTERN_PATH,
        help=f"Scripted bullet pattern file (default: {PATTERN_PATH})",
    )
    parser.add_argument(
        "--scores",
        type=str,
        default=LEADERBOARD_CONFIG["path"],
        help=f"Leaderboard file (default: {LEADERBOARD_CONFIG['path']})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run one random-policy episode through the gymnasium env instead of playing",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Print frames while running headless",
    )

    args = parser.parse_args()

    if args.headless:
        run_random_episode(render=args.render, seed=args.seed, pattern_path=args.pattern)
        return

    # curses is only needed for interactive play
    from .terminal import play

    score = play(args.pattern, args.scores, seed=args.seed)
    print(f"[DeffDred] Final score: {score}")


if __name__ == "__main__":
    main()
