"""
Word Ladder Server Application Package

Daily word ladder puzzles: ladder search and pair verification, a
pre-generated schedule of puzzles, leaderboards and shared challenges, served
through a Flask application.
"""

from dataclasses import dataclass

from flask import Flask
from flask_cors import CORS

from .config import Config
from .services.challenge_service import ChallengeService
from .services.dictionary import WordDictionary
from .services.game_service import GameService, epoch_ms
from .services.leaderboard_service import LeaderboardService
from .services.repository import PuzzleRepository
from .services.schedule_service import ScheduleService
from .services.verifier import PairVerifier


@dataclass
class Services:
    """Everything a request handler needs, built once per app."""
    dictionary: WordDictionary
    repository: PuzzleRepository
    verifier: PairVerifier
    game: GameService
    schedule: ScheduleService
    leaderboard: LeaderboardService
    challenges: ChallengeService


def build_services(dictionary: WordDictionary, repository: PuzzleRepository, config_class=Config) -> Services:
    """Wire the services around one dictionary and one repository."""
    verifier = PairVerifier(dictionary)
    return Services(
        dictionary=dictionary,
        repository=repository,
        verifier=verifier,
        game=GameService(dictionary, clock=epoch_ms),
        schedule=ScheduleService(repository, dictionary, verifier, max_moves=config_class.DEFAULT_MAX_MOVES),
        leaderboard=LeaderboardService(repository),
        challenges=ChallengeService(repository),
    )


def create_app(config_class=Config, dictionary: WordDictionary = None, repository: PuzzleRepository = None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        dictionary: Loaded WordDictionary; loaded from WORDS_FILE when omitted
        repository: PuzzleRepository; connected through MONGO_URI when omitted

    Returns:
        Flask application instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    if dictionary is None:
        dictionary = WordDictionary()
        dictionary.load_file(config_class.WORDS_FILE)

    if repository is None:
        if not config_class.MONGO_URI:
            raise RuntimeError("MONGO_URI is not configured")
        repository = PuzzleRepository.from_uri(config_class.MONGO_URI, config_class.MONGO_DB_NAME)

    # Initialize extensions
    CORS(app)
    app.extensions['word_ladder'] = build_services(dictionary, repository, config_class)

    # Register blueprints
    from .controllers.puzzle_controller import puzzle_bp
    from .controllers.leaderboard_controller import leaderboard_bp
    from .controllers.challenge_controller import challenge_bp

    app.register_blueprint(puzzle_bp, url_prefix='/api')
    app.register_blueprint(leaderboard_bp, url_prefix='/api')
    app.register_blueprint(challenge_bp, url_prefix='/api')

    return app
