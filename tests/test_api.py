"""Tests for the HTTP endpoints and Socket.IO events."""

import unittest
from datetime import date

import jwt

from letrix import create_app
from letrix.config import TestingConfig
from letrix.core.puzzle import get_solution
from letrix.models.game import GameMode
from letrix.services.dictionary_service import get_dictionary_service

GAME_DATE = "2024-05-01"
CLIENT = {'X-Client-Id': 'device-1'}


def token_for(player_id):
    return jwt.encode({'sub': player_id}, TestingConfig.JWT_SECRET, algorithm='HS256')


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.app, self.socketio = create_app(TestingConfig)
        self.client = self.app.test_client()
        self.solution = get_solution(
            date.fromisoformat(GAME_DATE), GameMode.TERM, 'pt', get_dictionary_service()
        ).solution[0]

    def bootstrap(self, headers=CLIENT, mode='term'):
        return self.client.post('/api/session/bootstrap', headers=headers,
                                json={'mode': mode, 'language': 'pt', 'date': GAME_DATE})

    def guess(self, word, headers=CLIENT):
        return self.client.post('/api/session/guess', headers=headers,
                                json={'mode': 'term', 'language': 'pt', 'guess': word})


class TestPuzzleEndpoints(ApiTestCase):

    def test_modes(self):
        data = self.client.get('/api/modes').get_json()
        self.assertTrue(data['success'])
        self.assertEqual([mode['name'] for mode in data['modes']],
                         ['term', 'duo', 'trio', 'four', 'deca', 'infinite'])
        self.assertEqual(data['languages'], ['pt', 'en'])

    def test_puzzle_metadata_hides_words(self):
        response = self.client.get(f'/api/puzzle/pt/duo?date={GAME_DATE}')
        self.assertEqual(response.status_code, 200)
        puzzle = response.get_json()['puzzle']
        self.assertEqual(puzzle['boards'], 2)
        self.assertTrue(puzzle['available'])
        self.assertNotIn('solution', puzzle)

    def test_mode_accepts_id_or_name(self):
        self.assertEqual(self.client.get('/api/puzzle/en/4').status_code, 200)
        self.assertEqual(self.client.get('/api/puzzle/en/four').status_code, 200)

    def test_bad_mode_language_or_date(self):
        self.assertEqual(self.client.get('/api/puzzle/pt/solo').status_code, 400)
        self.assertEqual(self.client.get('/api/puzzle/fr/term').status_code, 400)
        self.assertEqual(self.client.get('/api/puzzle/pt/term?date=2023-01-01').status_code, 400)
        self.assertEqual(self.client.get('/api/puzzle/pt/term?date=tomorrow').status_code, 400)

    def test_health(self):
        data = self.client.get('/api/health').get_json()
        self.assertEqual(data['status'], 'healthy')
        self.assertEqual(data['dictionary'], 'JsonDictionary')
        self.assertFalse(data['cloud_storage'])
        self.assertGreater(data['log_stats']['total_entries'], 0)
        self.assertIn('USER_ACTION', data['log_stats']['events'])


class TestSessionEndpoints(ApiTestCase):

    def test_player_identity_required(self):
        response = self.client.post('/api/session/bootstrap', json={'mode': 'term', 'language': 'pt'})
        self.assertEqual(response.status_code, 400)

    def test_client_id_must_be_text(self):
        response = self.client.post('/api/session/bootstrap',
                                    json={'mode': 'term', 'language': 'pt', 'client_id': 123})
        self.assertEqual(response.status_code, 400)

    def test_bootstrap_fresh_round(self):
        response = self.bootstrap()
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['outcome'], 'fresh')
        self.assertEqual(data['state']['tries'], [])
        self.assertNotIn('solution', data['state']['puzzle'])

    def test_state_requires_bootstrap(self):
        response = self.client.get('/api/session/state?mode=term&language=pt', headers=CLIENT)
        self.assertEqual(response.status_code, 404)

        self.bootstrap()
        response = self.client.get('/api/session/state?mode=term&language=pt', headers=CLIENT)
        self.assertEqual(response.status_code, 200)

    def test_winning_guess(self):
        self.bootstrap()
        response = self.guess(self.solution)
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['outcome']['won_now'])
        self.assertTrue(data['state']['won'])
        self.assertEqual(len(data['state']['puzzle']['solution']), 1)

        stats = self.client.get('/api/stats/pt/term', headers=CLIENT).get_json()
        self.assertEqual(stats['stats']['wins'], 1)
        self.assertEqual(stats['success_rate'], 100)

    def test_rejected_guess(self):
        self.bootstrap()
        response = self.guess('qqqqq')
        self.assertEqual(response.status_code, 400)
        data = response.get_json()
        self.assertFalse(data['success'])
        self.assertEqual(data['outcome']['rejection'], 'not_a_word')
        self.assertEqual(data['state']['invalids'], ['qqqqq'])

    def test_guess_requires_word(self):
        self.bootstrap()
        response = self.client.post('/api/session/guess', headers=CLIENT, json={'mode': 'term'})
        self.assertEqual(response.status_code, 400)

    def test_definition_only_for_solved_words(self):
        self.bootstrap()
        url = f'/api/definitions/pt/{self.solution}'
        self.assertEqual(self.client.get(url, headers=CLIENT).status_code, 404)
        self.guess(self.solution)
        data = self.client.get(url, headers=CLIENT).get_json()
        self.assertTrue(data['success'])
        self.assertIn('definition', data)

    def test_players_do_not_share_sessions(self):
        self.bootstrap()
        self.guess(self.solution)
        other = {'X-Client-Id': 'device-2'}
        data = self.bootstrap(headers=other).get_json()
        self.assertEqual(data['state']['tries'], [])


class TestTokenPlayers(ApiTestCase):

    def test_valid_token_identifies_player(self):
        headers = {'Authorization': f'Bearer {token_for("user-42")}'}
        self.assertEqual(self.bootstrap(headers=headers).status_code, 200)
        self.guess(self.solution, headers=headers)

        # Same player, another device
        data = self.bootstrap(headers=headers).get_json()
        self.assertTrue(data['state']['won'])

    def test_invalid_token_is_rejected(self):
        headers = {'Authorization': 'Bearer not-a-token'}
        self.assertEqual(self.bootstrap(headers=headers).status_code, 401)

    def test_token_without_player_is_rejected(self):
        token = jwt.encode({'role': 'guest'}, TestingConfig.JWT_SECRET, algorithm='HS256')
        headers = {'Authorization': f'Bearer {token}'}
        self.assertEqual(self.bootstrap(headers=headers).status_code, 401)

    def test_token_cannot_claim_an_anonymous_id(self):
        headers = {'Authorization': f'Bearer {token_for("anon:device-1")}'}
        self.assertEqual(self.bootstrap(headers=headers).status_code, 401)


class EnglishDefaultConfig(TestingConfig):
    DEFAULT_LANGUAGE = 'en'


class TestDefaultLanguage(unittest.TestCase):

    def setUp(self):
        self.app, self.socketio = create_app(EnglishDefaultConfig)
        self.client = self.app.test_client()

    def bootstrap(self, **headers):
        return self.client.post('/api/session/bootstrap', headers=dict(CLIENT, **headers),
                                json={'mode': 'term', 'date': GAME_DATE})

    def test_configured_language_is_used_without_locale(self):
        self.assertEqual(self.bootstrap().get_json()['state']['language'], 'en')

    def test_browser_locale_wins_over_default(self):
        data = self.bootstrap(**{'Accept-Language': 'pt-BR'}).get_json()
        self.assertEqual(data['state']['language'], 'pt')

    def test_socket_events_use_configured_language(self):
        socket = self.socketio.test_client(self.app)
        socket.emit('bootstrap', {'client_id': 'socket-en', 'mode': 'term'})
        states = [event['args'][0] for event in socket.get_received() if event['name'] == 'session_state']
        self.assertEqual(states[0]['state']['language'], 'en')
        socket.disconnect()


class TestSocketEvents(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.socket = self.socketio.test_client(self.app)
        self.identity = {'client_id': 'socket-1', 'mode': 'term', 'language': 'pt'}

    def tearDown(self):
        self.socket.disconnect()

    def events(self, name):
        return [event['args'][0] for event in self.socket.get_received() if event['name'] == name]

    def test_bootstrap_replies_with_state(self):
        self.socket.emit('bootstrap', self.identity)
        states = self.events('session_state')
        self.assertEqual(len(states), 1)
        self.assertTrue(states[0]['success'])
        self.assertIn(states[0]['outcome'], ('fresh', 'resumed'))

    def test_missing_identity_is_an_error(self):
        self.socket.emit('bootstrap', {'mode': 'term', 'language': 'pt'})
        self.assertEqual(len(self.events('error')), 1)

    def test_event_before_bootstrap_is_an_error(self):
        self.socket.emit('type_letter', dict(self.identity, letter='a'))
        self.assertEqual(len(self.events('error')), 1)

    def test_typing_and_short_submission(self):
        self.socket.emit('bootstrap', self.identity)
        self.socket.get_received()

        self.socket.emit('type_letter', dict(self.identity, letter='a'))
        state = self.events('session_state')[0]['state']
        self.assertEqual(state['current_guess']['letters'][0], 'a')
        self.assertEqual(state['selected_tile_index'], 1)

        self.socket.emit('delete_letter', self.identity)
        state = self.events('session_state')[0]['state']
        self.assertEqual(state['current_guess']['word'], '')

        self.socket.emit('move_cursor', dict(self.identity, index=3))
        self.assertEqual(self.events('session_state')[0]['state']['selected_tile_index'], 3)

        self.socket.emit('submit_guess', self.identity)
        rejected = self.events('guess_rejected')
        self.assertEqual(rejected[0]['outcome']['rejection'], 'too_short')

    def test_raw_key_presses(self):
        self.socket.emit('bootstrap', self.identity)
        self.socket.get_received()

        self.socket.emit('key_press', dict(self.identity, code='KeyA', key='a'))
        state = self.events('session_state')[0]['state']
        self.assertEqual(state['current_guess']['letters'][0], 'a')

        self.socket.emit('key_press', dict(self.identity, code='Enter'))
        rejected = self.events('guess_rejected')
        self.assertEqual(rejected[0]['outcome']['rejection'], 'too_short')

    def test_saved_state_is_broadcast_to_player_room(self):
        self.socket.emit('bootstrap', self.identity)
        self.socket.get_received()

        self.socket.emit('submit_guess', dict(self.identity, guess='carta'))
        received = self.socket.get_received()
        names = [event['name'] for event in received]
        self.assertIn('state_updated', names)
        self.assertIn('session_state', names)


if __name__ == '__main__':
    unittest.main()
