"""
Leaderboard Controller

Handles solution and daily completion submissions and the leaderboards
built from them.
"""

from flask import Blueprint, request, jsonify

from ..utils.game_logger import game_logger
from ..utils.helpers import error_response, get_services, get_user_identity, serialize_document

leaderboard_bp = Blueprint('leaderboard', __name__)


@leaderboard_bp.route('/solutions', methods=['POST'])
def submit_solution():
    """Record a solved puzzle."""
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}

        game_logger.log_user_action(
            request, 'submit_solution',
            challenge_date=data.get('challenge_date'), word_length=data.get('word_length')
        )

        solution = services.leaderboard.record_solution(data)

        response_data = {'success': True, 'data': serialize_document(solution)}
        game_logger.log_server_response(request, 'submit_solution', True, response_data)
        return jsonify(response_data)

    except (TypeError, ValueError) as e:
        body, status = error_response(str(e))
        game_logger.log_server_response(request, 'submit_solution', False, body)
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'submit_solution')
        body, status = error_response('Failed to submit solution', 500)
        return jsonify(body), status


@leaderboard_bp.route('/leaderboard', methods=['GET'])
def steps_leaderboard():
    """Fewest-step solutions for a date, optionally filtered by wordLength."""
    try:
        services = get_services()
        challenge_date = request.args.get('date')
        word_length = request.args.get('wordLength', type=int)

        if not challenge_date:
            body, status = error_response('Date parameter required')
            return jsonify(body), status

        entries = services.leaderboard.steps_leaderboard(challenge_date, word_length)
        return jsonify({'success': True, 'data': serialize_document(entries)})

    except ValueError as e:
        body, status = error_response(str(e))
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'steps_leaderboard')
        body, status = error_response('Failed to fetch leaderboard', 500)
        return jsonify(body), status


@leaderboard_bp.route('/leaderboard/puzzle', methods=['GET'])
def puzzle_leaderboard():
    """Fastest solutions for one date and word length."""
    try:
        services = get_services()
        challenge_date = request.args.get('date')
        word_length = request.args.get('wordLength', type=int)

        if not challenge_date or word_length is None:
            body, status = error_response('date and wordLength are required')
            return jsonify(body), status

        entries = services.leaderboard.puzzle_leaderboard(challenge_date, word_length)
        return jsonify({'success': True, 'data': serialize_document(entries)})

    except ValueError as e:
        body, status = error_response(str(e))
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'puzzle_leaderboard')
        body, status = error_response('Failed to fetch leaderboard', 500)
        return jsonify(body), status


@leaderboard_bp.route('/completions', methods=['POST'])
def submit_completion():
    """Record a day on which every puzzle was solved."""
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}

        game_logger.log_user_action(
            request, 'submit_completion',
            challenge_date=data.get('challenge_date'), total_time_ms=data.get('total_time_ms')
        )

        completion = services.leaderboard.record_completion(data)

        game_logger.log_game_event(
            'day_completed', get_user_identity()['user_ip'],
            challenge_date=completion.get('challenge_date'),
            total_time_ms=completion.get('total_time_ms')
        )

        response_data = {'success': True, 'data': serialize_document(completion)}
        game_logger.log_server_response(request, 'submit_completion', True, response_data)
        return jsonify(response_data)

    except (TypeError, ValueError) as e:
        body, status = error_response(str(e))
        game_logger.log_server_response(request, 'submit_completion', False, body)
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'submit_completion')
        body, status = error_response('Failed to save completion', 500)
        return jsonify(body), status


@leaderboard_bp.route('/leaderboard/daily', methods=['GET'])
def daily_leaderboard():
    """Completions for one date, or the all-time board with ?global=true."""
    try:
        services = get_services()
        is_global = request.args.get('global', '').lower() == 'true'

        if is_global:
            entries = services.leaderboard.global_leaderboard()
        else:
            challenge_date = request.args.get('date')
            if not challenge_date:
                body, status = error_response('date parameter is required')
                return jsonify(body), status
            entries = services.leaderboard.daily_leaderboard(challenge_date)

        return jsonify({'success': True, 'data': serialize_document(entries)})

    except Exception as e:
        game_logger.log_error(request, e, 'daily_leaderboard')
        body, status = error_response('Failed to fetch leaderboard', 500)
        return jsonify(body), status
