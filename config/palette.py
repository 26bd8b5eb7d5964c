"""Named color palette stored as a flat JSON table of name -> RGB."""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

from huectl.colors import RGB


class PaletteError(ValueError):
    """Raised when a palette file or entry cannot be understood."""


def parse_color(name: str, value: Any) -> RGB:
    """Parse one palette entry.

    Accepts ``[r, g, b]``, ``{"r": .., "g": .., "b": ..}`` or ``"#rrggbb"``.
    """
    try:
        if isinstance(value, str):
            return RGB.from_hex(value)
        if isinstance(value, dict):
            return RGB(value['r'], value['g'], value['b'])
        if isinstance(value, (list, tuple)) and len(value) == 3:
            return RGB(*value)
    except (KeyError, ValueError) as e:
        raise PaletteError(f"Invalid color '{name}': {e}") from e
    raise PaletteError(f"Invalid color '{name}': {value!r}")


class NamedColorPalette(Mapping[str, RGB]):
    """Read-only mapping of color names to RGB values."""

    def __init__(self, colors: Optional[Dict[str, RGB]] = None):
        self._colors: Dict[str, RGB] = dict(colors or {})

    def __getitem__(self, name: str) -> RGB:
        return self._colors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def __repr__(self) -> str:
        return f"NamedColorPalette({self._colors!r})"

    @classmethod
    def from_dict(cls, data: Any) -> 'NamedColorPalette':
        if not isinstance(data, dict):
            raise PaletteError("Palette must be a JSON object of name -> color")
        return cls({str(name): parse_color(name, value) for name, value in data.items()})

    @classmethod
    def load(cls, path: Path) -> 'NamedColorPalette':
        """Load a palette from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            PaletteError: If the content is not a valid palette
        """
        with open(path, 'r') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise PaletteError(f"Palette file {path} is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def with_color(self, name: str, rgb: RGB) -> 'NamedColorPalette':
        colors = dict(self._colors)
        colors[name] = rgb
        return NamedColorPalette(colors)

    def without_color(self, name: str) -> 'NamedColorPalette':
        colors = dict(self._colors)
        del colors[name]
        return NamedColorPalette(colors)

    def to_dict(self) -> Dict[str, list]:
        return {name: list(rgb.as_tuple()) for name, rgb in self._colors.items()}

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
