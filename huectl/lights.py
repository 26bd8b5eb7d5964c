"""Light records as reported by the bridge's v1 lights resource."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class LightState:
    on: bool = False
    bri: int = 0
    hue: int = 0
    sat: int = 0
    effect: str = "none"
    xy: List[float] = field(default_factory=list)
    ct: int = 0
    alert: str = "none"
    colormode: str = ""
    reachable: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LightState':
        # White-only bulbs omit the color fields entirely
        return cls(
            on=bool(data.get('on', False)),
            bri=int(data.get('bri', 0)),
            hue=int(data.get('hue', 0)),
            sat=int(data.get('sat', 0)),
            effect=data.get('effect', 'none'),
            xy=[float(v) for v in data.get('xy', [])],
            ct=int(data.get('ct', 0)),
            alert=data.get('alert', 'none'),
            colormode=data.get('colormode', ''),
            reachable=bool(data.get('reachable', False)),
        )


@dataclass
class Light:
    index: str
    name: str
    state: LightState = field(default_factory=LightState)
    light_type: str = ""
    modelid: str = ""
    manufacturername: str = ""
    uniqueid: str = ""
    swversion: str = ""

    @classmethod
    def from_dict(cls, index: str, data: Dict[str, Any]) -> 'Light':
        """Build a Light from one entry of ``GET /api/<token>/lights``.

        Args:
            index: Key of the entry in the bridge response
            data: The entry itself

        Returns:
            Parsed Light
        """
        return cls(
            index=str(index),
            name=data.get('name', f'Light {index}'),
            state=LightState.from_dict(data.get('state', {})),
            light_type=data.get('type', ''),
            modelid=data.get('modelid', ''),
            manufacturername=data.get('manufacturername', ''),
            uniqueid=data.get('uniqueid', ''),
            swversion=data.get('swversion', ''),
        )

    @property
    def supports_color(self) -> bool:
        return bool(self.state.xy) or self.state.colormode in ('xy', 'hs')


def parse_lights(data: Dict[str, Any]) -> Dict[str, Light]:
    """Parse the lights resource, ordered by numeric index."""
    def sort_key(key: str):
        return (0, int(key), key) if key.isdigit() else (1, 0, key)

    return {
        str(key): Light.from_dict(key, data[key])
        for key in sorted(data, key=sort_key)
        if isinstance(data[key], dict)
    }


def format_light(light: Light) -> str:
    """Readable, multi-line description of a light and its state."""
    state = light.state
    if len(state.xy) == 2:
        xy = f"x: {state.xy[0]}\ty: {state.xy[1]}"
    else:
        xy = "x: n/a\ty: n/a"
    lines = [
        f"Light {light.index}:",
        f"\tName: {light.name}",
        f"\tType: {light.light_type}",
        f"\tModel ID: {light.modelid}",
        f"\tManufacturer: {light.manufacturername}",
        f"\tUnique ID: {light.uniqueid}",
        f"\tSoftware Version: {light.swversion}",
        "\tState:",
        f"\t\tOn: {state.on}",
        f"\t\tBrightness: {state.bri}",
        f"\t\tHue: {state.hue}",
        f"\t\tSaturation: {state.sat}",
        f"\t\tEffect: {state.effect}",
        f"\t\t{xy}",
        f"\t\tColor Temperature: {state.ct}",
        f"\t\tAlert: {state.alert}",
        f"\t\tColor Mode: {state.colormode}",
        f"\t\tReachable: {state.reachable}",
    ]
    return "\n".join(lines)


def find_lights_by_name(lights: Dict[str, Light], name: str) -> List[Light]:
    return [light for light in lights.values() if light.name == name]
