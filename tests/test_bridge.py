"""Tests for huectl.bridge: bridge requests built from light commands."""

import copy
from unittest import mock

import pytest

from config.palette import NamedColorPalette
from huectl.bridge import (
    BridgeError,
    ColorNotFoundError,
    HueBridge,
    LightNotFoundError,
)
from huectl.colors import RGB, from_rgb
from huectl.gamut import GAMUT_B, closest_point

from test_lights import LIGHT_DATA, WHITE_DATA

BASE = "http://10.0.0.2/api/abc/lights"


def _response(data):
    response = mock.Mock()
    response.json.return_value = data
    response.raise_for_status.return_value = None
    return response


def _bridge(lights, put_reply=None, transition_time_ms=None):
    session = mock.Mock()
    session.get.return_value = _response(lights)
    session.put.return_value = _response(put_reply if put_reply is not None else [{'success': {}}])
    bridge = HueBridge('10.0.0.2', 'abc', transition_time_ms=transition_time_ms, session=session)
    bridge.refresh_lights()
    return bridge, session


def _light(name, on=False, reachable=True, modelid='LCT003'):
    data = copy.deepcopy(LIGHT_DATA)
    data['name'] = name
    data['modelid'] = modelid
    data['state']['on'] = on
    data['state']['reachable'] = reachable
    return data


def _put_calls(session):
    return [(c.args[0], c.kwargs['json']) for c in session.put.call_args_list]


class TestConstruction:
    def test_requires_ip_and_token(self):
        with pytest.raises(BridgeError):
            HueBridge('', 'abc')
        with pytest.raises(BridgeError):
            HueBridge('10.0.0.2', '')

    def test_base_address(self):
        assert HueBridge('10.0.0.2', 'abc', session=mock.Mock()).base_address == BASE


class TestRefresh:
    def test_loads_lights(self):
        bridge, session = _bridge({'1': LIGHT_DATA, '2': WHITE_DATA})
        session.get.assert_called_once_with(BASE, timeout=5.0)
        assert list(bridge.lights) == ['1', '2']

    def test_error_reply(self):
        session = mock.Mock()
        session.get.return_value = _response(
            [{'error': {'type': 1, 'description': 'unauthorized user'}}])
        bridge = HueBridge('10.0.0.2', 'abc', session=session)
        with pytest.raises(BridgeError, match='unauthorized user'):
            bridge.refresh_lights()


class TestPower:
    def test_toggle_turns_off_when_any_on(self):
        bridge, session = _bridge({'1': _light('a', on=True), '2': _light('b')})
        assert bridge.toggle_lights() is False
        assert _put_calls(session) == [(f"{BASE}/1/state", {'on': False})]
        assert not bridge.lights['1'].state.on

    def test_toggle_turns_on_when_all_off(self):
        bridge, session = _bridge({'1': _light('a'), '2': _light('b')})
        assert bridge.toggle_lights() is True
        assert _put_calls(session) == [
            (f"{BASE}/1/state", {'on': True}),
            (f"{BASE}/2/state", {'on': True}),
        ]

    def test_unreachable_lights_ignored(self):
        bridge, session = _bridge({'1': _light('a', on=True, reachable=False), '2': _light('b')})
        assert bridge.toggle_lights() is True
        assert _put_calls(session) == [(f"{BASE}/2/state", {'on': True})]


class TestSetColor:
    def test_payload_is_gamut_adjusted(self):
        bridge, session = _bridge({'1': _light('a', modelid='LCT001')})
        point = bridge.set_color_by_index_and_rgb('1', RGB(255, 0, 0))

        url, payload = _put_calls(session)[0]
        assert url == f"{BASE}/1/state"
        assert payload == {'on': True, 'bri': point.brightness, 'xy': [point.x, point.y]}
        assert point.xy != from_rgb(RGB(255, 0, 0)).xy
        assert point.xy == closest_point(from_rgb(RGB(255, 0, 0)).xy, GAMUT_B)
        assert point.brightness == from_rgb(RGB(255, 0, 0)).brightness

    def test_unknown_model_not_adjusted(self):
        bridge, session = _bridge({'1': _light('a', modelid='XYZ999')})
        point = bridge.set_color_by_index_and_rgb('1', RGB(255, 0, 0))
        assert point == from_rgb(RGB(255, 0, 0))

    def test_transition_time(self):
        bridge, session = _bridge({'1': _light('a')}, transition_time_ms=400)
        bridge.set_color_by_index_and_rgb('1', RGB(10, 20, 30))
        assert _put_calls(session)[0][1]['transitiontime'] == 4

    def test_all_skips_white_lights(self):
        bridge, session = _bridge({'1': WHITE_DATA, '2': _light('a'),
                                   '3': _light('b', reachable=False)})
        points = bridge.set_all_by_rgb(RGB(255, 0, 0))

        assert len(points) == 1
        assert [url for url, _ in _put_calls(session)] == [f"{BASE}/2/state"]

    def test_unknown_index(self):
        bridge, _ = _bridge({'1': _light('a')})
        with pytest.raises(LightNotFoundError):
            bridge.set_color_by_index_and_rgb('7', RGB(1, 2, 3))

    def test_by_name_sets_all_matches(self):
        bridge, session = _bridge({'1': _light('desk'), '2': _light('lamp'), '3': _light('desk')})
        bridge.set_color_by_name_and_rgb('desk', RGB(0, 0, 255))
        assert [url for url, _ in _put_calls(session)] == [f"{BASE}/1/state", f"{BASE}/3/state"]

    def test_by_unknown_name(self):
        bridge, _ = _bridge({'1': _light('desk')})
        with pytest.raises(LightNotFoundError):
            bridge.set_color_by_name_and_rgb('lamp', RGB(0, 0, 255))

    def test_palette_color(self):
        palette = NamedColorPalette({'blue': RGB(0, 0, 255)})
        bridge, session = _bridge({'1': _light('a'), '2': _light('b', reachable=False)})
        bridge.set_all_by_color('blue', palette)
        assert [url for url, _ in _put_calls(session)] == [f"{BASE}/1/state"]

    def test_missing_palette_color(self):
        bridge, session = _bridge({'1': _light('a')})
        with pytest.raises(ColorNotFoundError):
            bridge.set_color_by_index_and_color('1', 'mauve', NamedColorPalette())
        session.put.assert_not_called()

    def test_bridge_rejects_update(self):
        reply = [{'error': {'type': 201, 'description': 'parameter, xy, is not modifiable'}}]
        bridge, _ = _bridge({'1': _light('a')}, put_reply=reply)
        with pytest.raises(BridgeError, match='not modifiable'):
            bridge.set_color_by_index_and_rgb('1', RGB(1, 2, 3))


class TestRename:
    def test_rename(self):
        bridge, session = _bridge({'1': _light('old')})
        bridge.rename_light('1', 'new name')
        assert _put_calls(session) == [(f"{BASE}/1", {'name': 'new name'})]
        assert bridge.lights['1'].name == 'new name'

    def test_name_too_long(self):
        bridge, session = _bridge({'1': _light('old')})
        with pytest.raises(ValueError):
            bridge.rename_light('1', 'x' * 33)
        session.put.assert_not_called()


class TestDiscover:
    def test_unique_ips(self):
        reply = [
            {'id': 'a', 'internalipaddress': '10.0.0.2'},
            {'id': 'b', 'internalipaddress': '10.0.0.2'},
            {'id': 'c', 'internalipaddress': '10.0.0.3'},
        ]
        with mock.patch('huectl.bridge.requests.get', return_value=_response(reply)):
            assert HueBridge.discover_bridges() == ['10.0.0.2', '10.0.0.3']
