import json

from wordladder.utils.game_logger import GameLogger


class FakeRequest:
    endpoint = 'puzzle.submit_word'
    method = 'POST'
    url = 'http://localhost/api/puzzles/submit'
    remote_addr = '10.0.0.1'


def _entries(logger):
    lines = logger._log_file().read_text(encoding='utf-8').splitlines()
    return [json.loads(line.split(' | ', 2)[2]) for line in lines]


def test_entries_are_structured_json(tmp_path):
    logger = GameLogger(str(tmp_path), 'INFO')

    logger.log_user_action(FakeRequest(), 'submit_word', word='cot')
    logger.log_game_event('puzzle_won', '10.0.0.1', length=3)
    logger.log_job_event('populate_schedule', created=6)

    entries = _entries(logger)
    assert [e['event_type'] for e in entries] == ['USER_ACTION', 'GAME_EVENT', 'JOB_EVENT']
    assert entries[0]['user']['user_ip'] == '10.0.0.1'
    assert entries[0]['details']['word'] == 'cot'
    assert entries[2]['details']['created'] == 6


def test_response_data_is_trimmed(tmp_path):
    logger = GameLogger(str(tmp_path), 'INFO')
    state = {'length': 3, 'moves': 1, 'max_moves': 10, 'status': 'playing', 'word_chain': ['cat', 'cot']}

    logger.log_server_response(FakeRequest(), 'submit_word', True, {'success': True, 'state': state})

    details = _entries(logger)[0]['details']
    assert details['response_data']['state']['chain_length'] == 2
    assert 'word_chain' not in details['response_data']['state']


def test_log_stats(tmp_path):
    logger = GameLogger(str(tmp_path), 'INFO')
    logger.log_user_action(FakeRequest(), 'hint')
    logger.log_error(FakeRequest(), ValueError('boom'), 'hint')

    stats = logger.get_log_stats()

    assert stats['total_entries'] == 2
    assert stats['user_actions'] == 1
    assert stats['errors'] == 1
