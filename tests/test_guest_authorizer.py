"""
Unit tests for the guest authorization bridge.

Controller traffic goes through a mocked requests session so every
outbound call can be checked in order.
"""
from datetime import timedelta
from unittest.mock import Mock

import pytest
import requests

from src.exceptions import (
    AuthenticationFailed,
    AuthorizationFailed,
    ClientNotFound,
    ControllerUnavailable,
    MisconfiguredController,
)
from src.models.authorization import AuthorizationRequest
from src.unifi import GuestAuthorizer


CONTROLLER_URL = 'https://192.168.1.1'


def called_urls(session):
    """(method, url) of every controller request, in order."""
    return [(c.args[0], c.args[1]) for c in session.request.call_args_list]


def make_request(mac='AA:BB:CC:DD:EE:FF', ap='11:22:33:44:55:66'):
    return AuthorizationRequest(
        accept_tou='true',
        access_point_mac_address=ap,
        mac_address=mac
    )


class TestMockMode:
    """No controller configured."""

    def test_api_type_none_returns_mock_success(self, authorizer, settings_store, mock_session, fixed_now):
        """apiType 'none' grants 24 hours without touching the network."""
        settings_store.values = {'unifi_api_type': 'none', 'unifi_controller_url': CONTROLLER_URL}

        result = authorizer.authorize(make_request())

        assert result.valid is True
        assert result.minutes_left == 1440
        assert result.seconds_left == 59
        assert result.expire_on == fixed_now + timedelta(hours=24)
        assert result.last_login == fixed_now
        assert result.is_mock
        mock_session.request.assert_not_called()

    def test_missing_controller_url_returns_mock_success(self, authorizer, settings_store, mock_session):
        """Modern credentials without a URL still fall back to mock mode."""
        settings_store.values = {'unifi_api_type': 'modern', 'unifi_api_key': 'k1'}

        result = authorizer.authorize(make_request())

        assert result.valid is True
        assert result.is_mock
        mock_session.request.assert_not_called()

    def test_nothing_configured_returns_mock_success(self, authorizer, mock_session):
        """Empty store and environment is the designed default."""
        result = authorizer.authorize(make_request(mac='aa-bb-cc-dd-ee-ff'))

        assert result.valid is True
        assert result.mac_address == 'aa-bb-cc-dd-ee-ff'
        mock_session.request.assert_not_called()

    def test_payload_shape(self, authorizer):
        """Payload uses camelCase keys and ISO timestamps."""
        payload = authorizer.authorize(make_request()).to_dict()

        assert payload == {
            'macAddress': 'AA:BB:CC:DD:EE:FF',
            'minutesLeft': 1440,
            'secondsLeft': 59,
            'expireOn': '2025-03-02T12:00:00.000Z',
            'lastLogin': '2025-03-01T12:00:00.000Z',
            'valid': True
        }


class TestModernApi:
    """Token-authenticated controller API."""

    @pytest.fixture(autouse=True)
    def modern_settings(self, settings_store):
        settings_store.values = {
            'unifi_api_type': 'modern',
            'unifi_controller_url': CONTROLLER_URL,
            'unifi_api_key': 'k1',
            'unifi_site': 'default'
        }

    def test_lookup_then_authorize(self, authorizer, mock_session, controller_response):
        """One matching client: exactly two calls, lookup then action."""
        mock_session.request.side_effect = [
            controller_response(200, [{'id': 'c1', 'macAddress': 'AA:BB:CC:DD:EE:FF'}]),
            controller_response(200, {'action': 'AUTHORIZE_GUEST_ACCESS'}),
        ]

        result = authorizer.authorize(make_request())

        assert result.valid is True
        assert result.mode == 'modern'
        assert called_urls(mock_session) == [
            ('GET', f"{CONTROLLER_URL}/v1/sites/default/clients?filter=macAddress.eq('AA:BB:CC:DD:EE:FF')"),
            ('POST', f"{CONTROLLER_URL}/v1/sites/default/clients/c1/actions"),
        ]

        action_call = mock_session.request.call_args_list[1]
        assert action_call.kwargs['json'] == {
            'action': 'AUTHORIZE_GUEST_ACCESS',
            'timeLimitMinutes': 1440
        }

    def test_bearer_auth_and_tls_relaxed(self, authorizer, mock_session, controller_response):
        """Every call carries the API key and skips certificate verification."""
        mock_session.request.side_effect = [
            controller_response(200, [{'id': 'c1'}]),
            controller_response(200, {}),
        ]

        authorizer.authorize(make_request())

        for call in mock_session.request.call_args_list:
            assert call.kwargs['headers']['Authorization'] == 'Bearer k1'
            assert call.kwargs['verify'] is False
            assert call.kwargs['timeout'] == 10.0

    def test_mac_upper_cased_and_colon_delimited(self, authorizer, mock_session, controller_response):
        """aa-bb-cc-dd-ee-ff is queried as AA:BB:CC:DD:EE:FF."""
        mock_session.request.side_effect = [
            controller_response(200, [{'id': 'c1'}]),
            controller_response(200, {}),
        ]

        result = authorizer.authorize(make_request(mac='aa-bb-cc-dd-ee-ff'))

        lookup_url = called_urls(mock_session)[0][1]
        assert lookup_url.endswith("macAddress.eq('AA:BB:CC:DD:EE:FF')")
        # The caller's original spelling is echoed back
        assert result.mac_address == 'aa-bb-cc-dd-ee-ff'

    def test_paginated_lookup_body(self, authorizer, mock_session, controller_response):
        """A {'data': [...]} body is accepted as well as a bare list."""
        mock_session.request.side_effect = [
            controller_response(200, {'offset': 0, 'count': 1, 'data': [{'id': 'c9'}]}),
            controller_response(200, {}),
        ]

        authorizer.authorize(make_request())

        assert called_urls(mock_session)[1][1].endswith('/clients/c9/actions')

    def test_client_not_found(self, authorizer, mock_session, controller_response):
        """Empty lookup raises ClientNotFound and never authorizes."""
        mock_session.request.side_effect = [controller_response(200, [])]

        with pytest.raises(ClientNotFound) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == 'Client not connected to network'
        assert mock_session.request.call_count == 1

    def test_lookup_http_error(self, authorizer, mock_session, controller_response):
        """Non-2xx lookup is a controller availability problem."""
        mock_session.request.side_effect = [controller_response(401, {'error': 'unauthorized'})]

        with pytest.raises(ControllerUnavailable) as exc_info:
            authorizer.authorize(make_request())

        assert 'Failed to get client: 401' in exc_info.value.message
        assert mock_session.request.call_count == 1

    def test_lookup_timeout(self, authorizer, mock_session):
        """Timeouts surface as ControllerUnavailable."""
        mock_session.request.side_effect = requests.Timeout('read timed out')

        with pytest.raises(ControllerUnavailable):
            authorizer.authorize(make_request())

    def test_lookup_connection_error(self, authorizer, mock_session):
        mock_session.request.side_effect = requests.ConnectionError('no route to host')

        with pytest.raises(ControllerUnavailable):
            authorizer.authorize(make_request())

    def test_authorize_action_rejected(self, authorizer, mock_session, controller_response):
        """Rejected action raises AuthorizationFailed with the status."""
        mock_session.request.side_effect = [
            controller_response(200, [{'id': 'c1'}]),
            controller_response(403, {'error': 'forbidden'}),
        ]

        with pytest.raises(AuthorizationFailed) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.message == 'Authorization failed: 403'

    def test_missing_api_key_is_misconfigured(self, authorizer, settings_store, mock_session):
        settings_store.values = {'unifi_api_type': 'modern', 'unifi_controller_url': CONTROLLER_URL}

        with pytest.raises(MisconfiguredController):
            authorizer.authorize(make_request())

        mock_session.request.assert_not_called()

    def test_custom_site(self, authorizer, settings_store, mock_session, controller_response):
        settings_store.values['unifi_site'] = 'lobby'
        mock_session.request.side_effect = [
            controller_response(200, [{'id': 'c1'}]),
            controller_response(200, {}),
        ]

        authorizer.authorize(make_request())

        assert '/v1/sites/lobby/clients' in called_urls(mock_session)[0][1]


class TestLegacyApi:
    """Cookie-session controller API."""

    @pytest.fixture(autouse=True)
    def legacy_settings(self, settings_store):
        settings_store.values = {
            'unifi_api_type': 'legacy',
            'unifi_controller_url': CONTROLLER_URL,
            'unifi_username': 'admin',
            'unifi_password': 'secret'
        }

    def test_login_and_authorize_fallbacks(self, authorizer, mock_session, controller_response):
        """Classic login fails, newer login succeeds, classic stamgr fails, proxied stamgr succeeds."""
        mock_session.request.side_effect = [
            controller_response(401, {'meta': {'rc': 'error', 'msg': 'api.err.Invalid'}}),
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(200, {'meta': {'rc': 'error'}}),
            controller_response(200, {'meta': {'rc': 'ok'}, 'data': []}),
        ]

        result = authorizer.authorize(make_request())

        assert result.valid is True
        assert result.mode == 'legacy'
        assert called_urls(mock_session) == [
            ('POST', f"{CONTROLLER_URL}/api/login"),
            ('POST', f"{CONTROLLER_URL}/api/auth/login"),
            ('POST', f"{CONTROLLER_URL}/api/s/default/cmd/stamgr"),
            ('POST', f"{CONTROLLER_URL}/proxy/network/api/s/default/cmd/stamgr"),
        ]

        calls = mock_session.request.call_args_list
        assert calls[0].kwargs['json'] == {'username': 'admin', 'password': 'secret'}
        assert calls[1].kwargs['json'] == {'username': 'admin', 'password': 'secret', 'remember': True}
        for authorize_call in calls[2:]:
            assert authorize_call.kwargs['headers']['Cookie'] == 'unifises=xyz'
            assert 'X-CSRF-Token' not in authorize_call.kwargs['headers']

    def test_classic_login_success_skips_newer_endpoint(self, authorizer, mock_session, controller_response):
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=abc; Path=/']),
            controller_response(200, {'meta': {'rc': 'ok'}}),
        ]

        authorizer.authorize(make_request())

        assert called_urls(mock_session) == [
            ('POST', f"{CONTROLLER_URL}/api/login"),
            ('POST', f"{CONTROLLER_URL}/api/s/default/cmd/stamgr"),
        ]

    def test_cookies_joined_and_csrf_forwarded(self, authorizer, mock_session, controller_response):
        """All Set-Cookie values are reused and a csrf_token becomes a header."""
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=[
                'TOKEN=jwt123; Path=/; HttpOnly',
                'csrf_token=tok456; Path=/',
            ]),
            controller_response(200, {'meta': {'rc': 'ok'}}),
        ]

        authorizer.authorize(make_request())

        headers = mock_session.request.call_args_list[1].kwargs['headers']
        assert headers['Cookie'] == 'TOKEN=jwt123; Path=/; HttpOnly; csrf_token=tok456; Path=/'
        assert headers['X-CSRF-Token'] == 'tok456'

    def test_both_logins_rejected(self, authorizer, mock_session, controller_response):
        mock_session.request.side_effect = [
            controller_response(401, {}),
            controller_response(403, {}),
        ]

        with pytest.raises(AuthenticationFailed) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.message == 'Failed to authenticate with UniFi controller'
        assert mock_session.request.call_count == 2

    def test_logins_unreachable(self, authorizer, mock_session):
        """Transport failures on both login endpoints mean the controller is unavailable."""
        mock_session.request.side_effect = requests.ConnectionError('connection refused')

        with pytest.raises(ControllerUnavailable):
            authorizer.authorize(make_request())

        assert mock_session.request.call_count == 2

    def test_login_timeout_then_rejection(self, authorizer, mock_session, controller_response):
        mock_session.request.side_effect = [
            requests.Timeout('timed out'),
            controller_response(401, {}),
        ]

        with pytest.raises(AuthenticationFailed):
            authorizer.authorize(make_request())

    def test_all_paths_rejected_reports_last_message(self, authorizer, mock_session, controller_response):
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(200, {'meta': {'rc': 'error', 'msg': 'api.err.NoSiteContext'}}),
            controller_response(400, {'meta': {'rc': 'error', 'msg': 'api.err.UnknownStation'}}),
        ]

        with pytest.raises(AuthorizationFailed) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.message == 'api.err.UnknownStation'

    def test_all_paths_unparseable_reports_generic_message(self, authorizer, mock_session, controller_response):
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(404, text='<html>Not Found</html>'),
            requests.ConnectionError('reset'),
        ]

        with pytest.raises(AuthorizationFailed) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.message == 'Authorization failed on all paths'

    def test_failed_path_keeps_earlier_message(self, authorizer, mock_session, controller_response):
        """A path that raises does not erase the message from an earlier rejection."""
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(200, {'meta': {'rc': 'error', 'msg': 'api.err.NotFound'}}),
            requests.Timeout('timed out'),
        ]

        with pytest.raises(AuthorizationFailed) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.message == 'api.err.NotFound'

    def test_mac_lower_cased_and_colon_delimited(self, authorizer, mock_session, controller_response):
        """AA-BB-CC-DD-EE-FF is sent as aa:bb:cc:dd:ee:ff."""
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(200, {'meta': {'rc': 'ok'}}),
        ]

        authorizer.authorize(make_request(mac='AA-BB-CC-DD-EE-FF'))

        payload = mock_session.request.call_args_list[1].kwargs['json']
        assert payload['mac'] == 'aa:bb:cc:dd:ee:ff'
        assert payload['cmd'] == 'authorize-guest'
        assert payload['minutes'] == 1440

    def test_access_point_included_verbatim(self, authorizer, mock_session, controller_response):
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(200, {'meta': {'rc': 'ok'}}),
        ]

        authorizer.authorize(make_request(ap='F0-9F-C2-AA-BB-CC'))

        payload = mock_session.request.call_args_list[1].kwargs['json']
        assert payload['ap_mac'] == 'F0-9F-C2-AA-BB-CC'

    def test_unknown_access_point_omitted(self, authorizer, mock_session, controller_response):
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(200, {'meta': {'rc': 'ok'}}),
        ]

        authorizer.authorize(make_request(ap='unknown'))

        payload = mock_session.request.call_args_list[1].kwargs['json']
        assert 'ap_mac' not in payload

    def test_missing_password_is_misconfigured(self, authorizer, settings_store, mock_session):
        del settings_store.values['unifi_password']

        with pytest.raises(MisconfiguredController):
            authorizer.authorize(make_request())

        mock_session.request.assert_not_called()

    def test_controller_url_trailing_slash(self, authorizer, settings_store, mock_session, controller_response):
        settings_store.values['unifi_controller_url'] = CONTROLLER_URL + '/'
        mock_session.request.side_effect = [
            controller_response(200, {'meta': {'rc': 'ok'}}, set_cookies=['unifises=xyz']),
            controller_response(200, {'meta': {'rc': 'ok'}}),
        ]

        authorizer.authorize(make_request())

        assert called_urls(mock_session)[0][1] == f"{CONTROLLER_URL}/api/login"


class TestUnknownApiType:

    def test_unknown_api_type_is_misconfigured(self, authorizer, settings_store, mock_session):
        settings_store.values = {'unifi_api_type': 'cloud', 'unifi_controller_url': CONTROLLER_URL}

        with pytest.raises(MisconfiguredController):
            authorizer.authorize(make_request())

        mock_session.request.assert_not_called()


class TestSessionLifecycle:
    """Each authorization gets its own controller session."""

    def test_new_session_per_call_and_closed(self, settings_provider, settings_store, controller_response, fixed_now):
        settings_store.values = {
            'unifi_api_type': 'modern',
            'unifi_controller_url': CONTROLLER_URL,
            'unifi_api_key': 'k1'
        }
        first, second = Mock(spec=requests.Session), Mock(spec=requests.Session)
        first.request.side_effect = [controller_response(200, [{'id': 'c1'}]), controller_response(200, {})]
        second.request.side_effect = [controller_response(200, [{'id': 'c2'}]), controller_response(200, {})]
        factory = Mock(side_effect=[first, second])
        authorizer = GuestAuthorizer(settings_provider, session_factory=factory, clock=lambda: fixed_now)

        authorizer.authorize(make_request())
        authorizer.authorize(make_request())

        assert factory.call_count == 2
        first.close.assert_called_once()
        second.close.assert_called_once()
        assert first.request.call_count == 2
        assert second.request.call_count == 2

    def test_session_closed_on_failure(self, authorizer, settings_store, mock_session):
        settings_store.values = {
            'unifi_api_type': 'modern',
            'unifi_controller_url': CONTROLLER_URL,
            'unifi_api_key': 'k1'
        }
        mock_session.request.side_effect = requests.ConnectionError('refused')

        with pytest.raises(ControllerUnavailable):
            authorizer.authorize(make_request())

        mock_session.close.assert_called_once()

    def test_mock_mode_opens_no_session(self, settings_provider, fixed_now):
        factory = Mock()
        authorizer = GuestAuthorizer(settings_provider, session_factory=factory, clock=lambda: fixed_now)

        authorizer.authorize(make_request())

        factory.assert_not_called()


class TestErrorApiType:
    """Failures carry the API type they happened under."""

    def test_modern_failure_tagged(self, authorizer, settings_store, mock_session, controller_response):
        settings_store.values = {
            'unifi_api_type': 'modern',
            'unifi_controller_url': CONTROLLER_URL,
            'unifi_api_key': 'k1'
        }
        mock_session.request.side_effect = [controller_response(200, [])]

        with pytest.raises(ClientNotFound) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.api_type == 'modern'

    def test_misconfigured_tagged(self, authorizer, settings_store):
        settings_store.values = {'unifi_api_type': 'legacy', 'unifi_controller_url': CONTROLLER_URL}

        with pytest.raises(MisconfiguredController) as exc_info:
            authorizer.authorize(make_request())

        assert exc_info.value.api_type == 'legacy'
