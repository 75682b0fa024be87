"""
Puzzle Controller

Handles the daily puzzle, word submission, hint and pair verification
endpoints. Puzzle states live on the client; submit and reset take the
current state in the request body and return the next one.
"""

import datetime
from dataclasses import asdict

from flask import Blueprint, request, jsonify

from ..config.game_settings import DEFAULT_MAX_MOVES, get_word_statistics
from ..exceptions import ScheduleGapError
from ..models.game import PuzzleGameState, PuzzleStatus
from ..services.ladder import difficulty_for_steps
from ..services.schedule_service import normalize_date
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response, get_services, get_user_identity

puzzle_bp = Blueprint('puzzle', __name__)


def _requested_date() -> datetime.date:
    """The ?date= parameter; malformed or future dates fall back to today."""
    today = datetime.date.today()
    raw = request.args.get('date')
    if not raw:
        return today
    try:
        requested = datetime.date.fromisoformat(raw)
    except ValueError:
        return today
    return today if requested > today else requested


def _state_from_body(data, action):
    """Parse the client state or return an error response tuple."""
    if not data or not isinstance(data.get('state'), dict):
        return None, error_response('Puzzle state is required')
    try:
        return PuzzleGameState.from_dict(data['state']), None
    except (KeyError, TypeError, ValueError) as e:
        game_logger.log_error(request, e, action)
        return None, error_response('Invalid puzzle state')


@puzzle_bp.route('/puzzles', methods=['GET'])
def get_puzzles():
    """Get the puzzles for a date, falling back to the earliest complete date."""
    try:
        services = get_services()
        target_date = _requested_date()

        game_logger.log_user_action(request, 'get_puzzles', requested_date=target_date.isoformat())

        daily = services.schedule.resolve_playable_date(target_date)

        response_data = {
            'success': True,
            'date': daily.date,
            'requested_date': target_date.isoformat(),
            'puzzles': [asdict(puzzle) for puzzle in daily.puzzles]
        }
        game_logger.log_server_response(request, 'get_puzzles', True, response_data, date=daily.date)
        return jsonify(response_data)

    except ScheduleGapError as e:
        body, status = error_response(str(e), 404)
        game_logger.log_server_response(request, 'get_puzzles', False, body)
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'get_puzzles')
        body, status = error_response(f'Failed to load daily puzzles: {e}', 500)
        game_logger.log_server_response(request, 'get_puzzles', False, body)
        return jsonify(body), status


@puzzle_bp.route('/puzzles/date-range', methods=['GET'])
def get_date_range():
    """Earliest playable date and today."""
    try:
        services = get_services()
        today = datetime.date.today().isoformat()
        earliest = services.schedule.earliest_available_date()

        return jsonify({
            'success': True,
            'earliest_date': earliest or today,
            'today': today
        })

    except Exception as e:
        game_logger.log_error(request, e, 'get_date_range')
        body, status = error_response('Failed to fetch date range', 500)
        return jsonify(body), status


@puzzle_bp.route('/puzzles/submit', methods=['POST'])
def submit_word():
    """Submit a word against a client-held puzzle state."""
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}

        word = data.get('word')
        if not word or not isinstance(word, str):
            body, status = error_response('Word is required')
            game_logger.log_server_response(request, 'submit_word', False, body)
            return jsonify(body), status

        state, failure = _state_from_body(data, 'submit_word')
        if failure:
            return jsonify(failure[0]), failure[1]

        game_logger.log_user_action(request, 'submit_word', word=word, length=state.length)

        new_state = services.game.submit_word(state, word)

        response_data = {'success': True, 'state': asdict(new_state)}
        game_logger.log_server_response(
            request, 'submit_word', True, response_data,
            word=word, moves=new_state.moves, status=new_state.status
        )

        if new_state.status != state.status and new_state.is_finished:
            event = 'puzzle_won' if new_state.status == PuzzleStatus.WON.value else 'puzzle_lost'
            game_logger.log_game_event(
                event, get_user_identity()['user_ip'],
                length=new_state.length, moves=new_state.moves,
                start_word=new_state.start_word, end_word=new_state.end_word,
                completion_time_ms=new_state.completion_time_ms
            )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'submit_word')
        body, status = error_response(str(e), 500)
        game_logger.log_server_response(request, 'submit_word', False, body)
        return jsonify(body), status


@puzzle_bp.route('/puzzles/reset', methods=['POST'])
def reset_puzzle():
    """Reset a client-held puzzle state to its start word."""
    try:
        services = get_services()
        state, failure = _state_from_body(request.get_json(silent=True), 'reset_puzzle')
        if failure:
            return jsonify(failure[0]), failure[1]

        game_logger.log_user_action(request, 'reset_puzzle', length=state.length)

        new_state = services.game.reset_puzzle(state)
        return jsonify({'success': True, 'state': asdict(new_state)})

    except Exception as e:
        game_logger.log_error(request, e, 'reset_puzzle')
        body, status = error_response(str(e), 500)
        return jsonify(body), status


@puzzle_bp.route('/hint', methods=['POST'])
def get_hint():
    """
    Next word along the optimal ladder.

    With a 'state' in the body the hint policy applies (limited hints, none
    in the final moves). With start/end/position the raw hint is returned.
    """
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}

        if 'state' in data:
            state, failure = _state_from_body(data, 'hint')
            if failure:
                return jsonify(failure[0]), failure[1]

            optimal_steps = int(data.get('optimal_steps', 0))
            hints_used = int(data.get('hints_used', 0))

            game_logger.log_user_action(request, 'hint', length=state.length, hints_used=hints_used)

            hint = services.game.request_hint(state, optimal_steps, hints_used)
            if hint.next_word:
                game_logger.log_game_event(
                    'hint_given', get_user_identity()['user_ip'],
                    length=state.length, position=state.moves, hint=hint.next_word
                )
            return jsonify({'success': True, **asdict(hint)})

        start, end = data.get('start'), data.get('end')
        if not isinstance(start, str) or not isinstance(end, str) or not start or not end:
            body, status = error_response('start and end are required')
            return jsonify(body), status

        position = int(data.get('position', 0))
        game_logger.log_user_action(request, 'hint', start=start, end=end, position=position)

        next_word = services.game.compute_hint(position, start, end)
        return jsonify({'success': True, 'next_word': next_word})

    except (TypeError, ValueError) as e:
        game_logger.log_error(request, e, 'hint')
        body, status = error_response('Invalid hint request')
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'hint')
        body, status = error_response(str(e), 500)
        return jsonify(body), status


@puzzle_bp.route('/verify', methods=['POST'])
def verify_pair():
    """Check whether a word pair is solvable within a move budget."""
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}

        start = data.get('start')
        end = data.get('end')
        if not all(word is None or isinstance(word, str) for word in (start, end)):
            body, status = error_response('start and end must be strings')
            game_logger.log_server_response(request, 'verify_pair', False, body)
            return jsonify(body), status

        max_moves = int(data.get('max_moves', DEFAULT_MAX_MOVES))

        game_logger.log_user_action(request, 'verify_pair', start=start, end=end, max_moves=max_moves)

        result = services.verifier.verify(start, end, max_moves)

        response_data = {
            'success': True,
            'is_valid': result.is_valid,
            'optimal_steps': result.optimal_steps,
            'difficulty': difficulty_for_steps(result.optimal_steps).value,
            'reason': result.reason
        }
        game_logger.log_server_response(request, 'verify_pair', True, response_data)
        return jsonify(response_data)

    except (TypeError, ValueError) as e:
        game_logger.log_error(request, e, 'verify_pair')
        body, status = error_response('max_moves must be a number')
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'verify_pair')
        body, status = error_response(str(e), 500)
        return jsonify(body), status


@puzzle_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        services = get_services()
        today = normalize_date(datetime.date.today())

        response_data = {
            'status': 'healthy',
            'dictionary': get_word_statistics(services.dictionary),
            'today_complete': services.schedule.get_puzzles_for_date(today).is_complete,
            'log_stats': game_logger.get_log_stats()
        }
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        return jsonify({'status': 'error', 'error': str(e)}), 500
