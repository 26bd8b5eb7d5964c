"""Hue bridge connection and control over the v1 REST API."""

from typing import Any, Dict, List, Optional

import requests

from huectl.colors import RGB, ChromaticityPoint, from_rgb
from huectl.gamut import apply_model_gamut
from huectl.lights import Light, find_lights_by_name, format_light, parse_lights
from huectl.utils.logging import debug_print, timed_print

DISCOVERY_URL = "https://discovery.meethue.com/"
MAX_NAME_LENGTH = 32


class HueError(Exception):
    """Base class for errors reported by huectl."""


class BridgeError(HueError):
    """The bridge could not be reached or rejected a request."""


class LightNotFoundError(HueError):
    pass


class ColorNotFoundError(HueError):
    pass


class HueBridge:
    def __init__(self, bridge_ip: str, token: str, timeout: float = 5.0,
                 transition_time_ms: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        if not bridge_ip:
            raise BridgeError("No bridge IP configured. Use --bridge or run 'huectl discover'.")
        if not token:
            raise BridgeError("No API token configured. Use --token or write it to the token file.")

        self.bridge_ip = bridge_ip
        self.token = token
        self.timeout = timeout
        self.transition_time_ms = transition_time_ms
        self.session = session or requests.Session()

        self.lights: Dict[str, Light] = {}

    @property
    def base_address(self) -> str:
        return f"http://{self.bridge_ip}/api/{self.token}/lights"

    def _check_reply(self, reply: Any):
        """Raise BridgeError for the first error item in a bridge reply."""
        items = reply if isinstance(reply, list) else [reply]
        for item in items:
            if isinstance(item, dict) and 'error' in item:
                error = item['error']
                raise BridgeError(
                    f"Bridge error {error.get('type', '?')}: "
                    f"{error.get('description', 'Unknown error')}")

    def _get(self, url: str) -> Any:
        debug_print(f"GET {url}")
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        self._check_reply(data)
        return data

    def _put(self, url: str, payload: Dict[str, Any]) -> Any:
        debug_print(f"PUT {url} {payload}")
        response = self.session.put(url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        self._check_reply(data)
        return data

    def refresh_lights(self) -> Dict[str, Light]:
        """Fetch all lights from the bridge."""
        data = self._get(self.base_address)
        if not isinstance(data, dict):
            raise BridgeError(f"Unexpected lights response: {data!r}")
        self.lights = parse_lights(data)
        debug_print(f"Found {len(self.lights)} light(s)")
        return self.lights

    def get_light(self, index: str) -> Light:
        light = self.lights.get(str(index))
        if light is None:
            raise LightNotFoundError(f"Light index '{index}' does not exist.")
        return light

    def set_power(self, index: str, on: bool):
        light = self.get_light(index)
        self._put(f"{self.base_address}/{light.index}/state", {'on': on})
        light.state.on = on

    def power(self, on: bool) -> int:
        """Set all reachable lights to the same power state.

        Returns:
            Number of lights that changed
        """
        changed = 0
        for light in self.lights.values():
            if light.state.reachable and light.state.on != on:
                self.set_power(light.index, on)
                changed += 1
        return changed

    def toggle_lights(self) -> bool:
        """Toggle all lights so they end up in the same power state.

        If any reachable light is on, all are turned off; if all are off,
        all are turned on.

        Returns:
            The power state that was applied
        """
        any_on = any(light.state.on for light in self.lights.values()
                     if light.state.reachable)
        self.power(not any_on)
        return not any_on

    @staticmethod
    def color_for_light(light: Light, rgb: RGB) -> ChromaticityPoint:
        """Convert RGB to xy for a light, limited to the light's gamut."""
        point = from_rgb(rgb)
        apply_model_gamut(point, light.modelid)
        return point

    def set_color_by_index_and_rgb(self, index: str, rgb: RGB) -> ChromaticityPoint:
        light = self.get_light(index)
        point = self.color_for_light(light, rgb)

        payload: Dict[str, Any] = {'on': True}
        payload.update(point.as_state())
        if self.transition_time_ms is not None:
            # transitiontime is in multiples of 100ms
            payload['transitiontime'] = int(round(self.transition_time_ms / 100))

        self._put(f"{self.base_address}/{light.index}/state", payload)
        timed_print(f"Set light {light.index} ({light.name}) to xy={point.xy_string()}, "
                    f"brightness={point.brightness}")

        light.state.on = True
        light.state.bri = point.brightness
        light.state.xy = [point.x, point.y]
        return point

    def set_color_by_name_and_rgb(self, name: str, rgb: RGB) -> List[ChromaticityPoint]:
        matches = find_lights_by_name(self.lights, name)
        if not matches:
            raise LightNotFoundError(f"No light with name '{name}' found.")
        return [self.set_color_by_index_and_rgb(light.index, rgb) for light in matches]

    def set_all_by_rgb(self, rgb: RGB) -> List[ChromaticityPoint]:
        return [self.set_color_by_index_and_rgb(light.index, rgb)
                for light in self.lights.values()
                if light.state.reachable and light.supports_color]

    @staticmethod
    def _palette_color(palette, color: str) -> RGB:
        if color not in palette:
            raise ColorNotFoundError(f"Color value '{color}' not set.")
        return palette[color]

    def set_color_by_index_and_color(self, index: str, color: str, palette) -> ChromaticityPoint:
        """Set the color of a light to a named palette color."""
        self.get_light(index)
        return self.set_color_by_index_and_rgb(index, self._palette_color(palette, color))

    def set_color_by_name_and_color(self, name: str, color: str, palette) -> List[ChromaticityPoint]:
        return self.set_color_by_name_and_rgb(name, self._palette_color(palette, color))

    def set_all_by_color(self, color: str, palette) -> List[ChromaticityPoint]:
        return self.set_all_by_rgb(self._palette_color(palette, color))

    def rename_light(self, index: str, new_name: str):
        """Rename a light on the bridge.

        Raises:
            ValueError: If the name is empty or longer than the bridge allows
        """
        light = self.get_light(index)
        new_name = new_name.strip()
        if not new_name or len(new_name) > MAX_NAME_LENGTH:
            raise ValueError(f"Light name must be 1-{MAX_NAME_LENGTH} characters, got '{new_name}'")

        self._put(f"{self.base_address}/{light.index}", {'name': new_name})
        timed_print(f"Renamed light {light.index} from '{light.name}' to '{new_name}'")
        light.name = new_name

    def print_info(self):
        """Print every light and its state in readable form."""
        for light in self.lights.values():
            print(format_light(light))

    @classmethod
    def discover_bridges(cls, timeout: float = 5.0) -> List[str]:
        """Discover bridges using N-UPnP cloud discovery.

        Queries https://discovery.meethue.com/ for bridges associated
        with the public IP address.

        Returns:
            List of bridge IP addresses (unique, in response order)
        """
        response = requests.get(DISCOVERY_URL, headers={"User-Agent": "huectl/0.1"},
                                timeout=timeout)
        response.raise_for_status()

        bridges = []
        for bridge in response.json():
            internal_ip = bridge.get('internalipaddress')
            if internal_ip and internal_ip not in bridges:
                bridges.append(internal_ip)
                debug_print(f"N-UPnP found bridge at {internal_ip}")

        return bridges
