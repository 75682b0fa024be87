"""
Challenge Controller

Handles creating, joining and finishing shared challenges.
"""

from flask import Blueprint, request, jsonify

from ..exceptions import ChallengeError
from ..services.challenge_service import challenge_url
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response, get_services, get_user_identity, serialize_document

challenge_bp = Blueprint('challenge', __name__)


def _challenge_failure(e: ChallengeError, action: str):
    body, status = error_response(str(e), e.status_code)
    game_logger.log_server_response(request, action, False, body)
    return jsonify(body), status


@challenge_bp.route('/challenges/create', methods=['POST'])
def create_challenge():
    """Create a challenge for a date and return its share code."""
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}

        game_logger.log_user_action(request, 'create_challenge', challenge_date=data.get('challenge_date'))

        challenge = services.challenges.create_challenge(data.get('challenge_date'), data.get('challenger_id'))

        response_data = {
            'success': True,
            'challenge_code': challenge['challenge_code'],
            'challenge_url': challenge_url(challenge['challenge_code'], request.host_url),
            'challenge': serialize_document(challenge)
        }
        game_logger.log_server_response(request, 'create_challenge', True, response_data)
        return jsonify(response_data)

    except ChallengeError as e:
        return _challenge_failure(e, 'create_challenge')
    except Exception as e:
        game_logger.log_error(request, e, 'create_challenge')
        body, status = error_response('Failed to create challenge', 500)
        return jsonify(body), status


@challenge_bp.route('/challenges/<code>', methods=['GET'])
def get_challenge(code):
    """Challenge details with participants."""
    try:
        services = get_services()
        challenge = services.challenges.get_challenge(code)
        return jsonify({'success': True, 'challenge': serialize_document(challenge)})

    except ChallengeError as e:
        return _challenge_failure(e, 'get_challenge')
    except Exception as e:
        game_logger.log_error(request, e, 'get_challenge')
        body, status = error_response('Failed to fetch challenge', 500)
        return jsonify(body), status


@challenge_bp.route('/challenges/accept', methods=['POST'])
def accept_challenge():
    """Join a challenge as a user or anonymous session."""
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}
        code = data.get('challenge_code')

        game_logger.log_user_action(request, 'accept_challenge', challenge_code=code)

        challenge = services.challenges.accept_challenge(code, data.get('user_id'), data.get('session_id'))

        game_logger.log_game_event(
            'challenge_accepted', get_user_identity()['user_ip'],
            challenge_code=code, status=challenge.get('status')
        )
        return jsonify({'success': True, 'challenge': serialize_document(challenge)})

    except ChallengeError as e:
        return _challenge_failure(e, 'accept_challenge')
    except Exception as e:
        game_logger.log_error(request, e, 'accept_challenge')
        body, status = error_response('Failed to accept challenge', 500)
        return jsonify(body), status


@challenge_bp.route('/challenges/submit', methods=['POST'])
def submit_challenge_result():
    """Record a participant's result."""
    try:
        services = get_services()
        data = request.get_json(silent=True) or {}
        code = data.get('challenge_code')

        game_logger.log_user_action(
            request, 'submit_challenge_result',
            challenge_code=code, total_time_ms=data.get('total_time_ms')
        )

        challenge = services.challenges.submit_challenge_result(code, data)

        if challenge.get('status') == 'completed':
            game_logger.log_game_event('challenge_completed', get_user_identity()['user_ip'], challenge_code=code)

        return jsonify({'success': True, 'challenge': serialize_document(challenge)})

    except ChallengeError as e:
        return _challenge_failure(e, 'submit_challenge_result')
    except (TypeError, ValueError) as e:
        body, status = error_response(str(e))
        return jsonify(body), status
    except Exception as e:
        game_logger.log_error(request, e, 'submit_challenge_result')
        body, status = error_response('Failed to submit challenge result', 500)
        return jsonify(body), status


@challenge_bp.route('/challenges', methods=['GET'])
def list_challenges():
    """Challenges created for a date."""
    try:
        services = get_services()
        challenge_date = request.args.get('date')
        if not challenge_date:
            body, status = error_response('date parameter is required')
            return jsonify(body), status

        challenges = services.challenges.list_challenges_for_date(challenge_date)
        return jsonify({'success': True, 'data': serialize_document(challenges)})

    except Exception as e:
        game_logger.log_error(request, e, 'list_challenges')
        body, status = error_response('Failed to fetch challenges', 500)
        return jsonify(body), status
