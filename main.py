"""
Word Ladder Server - Main Entry Point

Starts the Flask application or runs one of the schedule maintenance jobs:

    python main.py serve
    python main.py populate-schedule [--start-date YYYY-MM-DD] [--days N]
    python main.py fill-gaps [--seed N]
"""

import argparse
import random
import sys

from wordladder import build_services, create_app
from wordladder.config import Config, get_word_statistics
from wordladder.services.dictionary import WordDictionary
from wordladder.services.repository import PuzzleRepository
from wordladder.utils.game_logger import game_logger


def load_dictionary() -> WordDictionary:
    dictionary = WordDictionary()
    dictionary.load_file(Config.WORDS_FILE)
    stats = get_word_statistics(dictionary)
    print(f"✓ Dictionary loaded: {stats['total_words']} words")
    return dictionary


def connect_repository() -> PuzzleRepository:
    if not Config.MONGO_URI:
        raise RuntimeError("MONGO_URI is not configured")
    repository = PuzzleRepository.from_uri(Config.MONGO_URI, Config.MONGO_DB_NAME)
    repository.ensure_indexes()
    print(f"✓ Connected to MongoDB database '{Config.MONGO_DB_NAME}'")
    return repository


def print_length_stats(title, stats_list):
    print(f"\n{title}")
    print(f"{'Length':>6} {'Scheduled':>10} {'Assigned':>9} {'Missing':>8} {'Pairs':>6} {'Needed':>7}")
    for stats in stats_list:
        print(f"{stats.length:>6} {stats.total_scheduled:>10} {stats.assigned:>9} "
              f"{stats.missing:>8} {stats.existing_pairs:>6} {stats.needed:>7}")


def run_populate_schedule(args):
    services = build_services(load_dictionary(), connect_repository(), Config)

    print(f"Populating schedule for {args.days} days...")
    summary = services.schedule.populate_schedule(args.start_date, args.days)

    print(f"✓ Created {summary['created']} entries ({summary['assigned']} assigned, "
          f"{summary['missing']} waiting for pairs), skipped {summary['skipped']}")
    if summary['missing']:
        print("Run 'python main.py fill-gaps' to generate pairs for the missing entries")


def run_fill_gaps(args):
    services = build_services(load_dictionary(), connect_repository(), Config)
    rng = random.Random(args.seed) if args.seed is not None else None

    print("Filling schedule gaps...")
    result = services.schedule.fill_schedule_gaps(rng)

    print_length_stats("Before", result['before'])
    print_length_stats("After", result['after'])

    remaining = sum(stats.missing for stats in result['after'])
    if remaining:
        print(f"\n{remaining} entries still unassigned; run fill-gaps again to continue")
    else:
        print("\n✓ Every scheduled date has a puzzle for every length")


def run_server(args):
    print("Creating Flask application...")
    app = create_app(Config, load_dictionary(), connect_repository())
    print("✓ Flask application created successfully")

    game_logger.logger.info("Word Ladder Server starting")

    print(f"\nStarting Word Ladder Server on {Config.HOST}:{Config.PORT}")
    print(f"Debug mode: {Config.DEBUG}")
    print("=" * 50)

    app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Daily word ladder server and schedule jobs")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the HTTP server")

    populate = subparsers.add_parser("populate-schedule", help="Create schedule entries from the pair bank")
    populate.add_argument("--start-date", default=None, help="First date to schedule (default: today)")
    populate.add_argument("--days", type=int, default=Config.DAYS_TO_SCHEDULE,
                          help="Number of days to schedule")

    fill = subparsers.add_parser("fill-gaps", help="Generate pairs for unassigned schedule entries")
    fill.add_argument("--seed", type=int, default=None, help="Random seed for reproducible generation")

    return parser


COMMANDS = {
    "serve": run_server,
    "populate-schedule": run_populate_schedule,
    "fill-gaps": run_fill_gaps,
}


def main(argv=None):
    """Parse the command line and run the chosen command (serve by default)."""
    args = build_parser().parse_args(argv)
    command = args.command or "serve"

    try:
        COMMANDS[command](args)
    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Word Ladder Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error running {command}: {e}")
        game_logger.logger.error(f"Error running {command}: {e}")
        raise


if __name__ == '__main__':
    main(sys.argv[1:])
