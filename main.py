"""huectl: control Philips Hue lights from the command line."""

import argparse
import sys
from typing import List, Optional

import requests

from config.palette import NamedColorPalette, PaletteError
from config.settings_manager import SettingsManager
from huectl.bridge import BridgeError, HueBridge, HueError
from huectl.colors import RGB, DomainError, from_rgb
from huectl.gamut import apply_model_gamut, gamut_class_for_model
from huectl.utils.logging import set_verbose, timed_print


def _channel(value: str) -> int:
    channel = int(value)
    if not 0 <= channel <= 255:
        raise argparse.ArgumentTypeError(f"channel must be 0-255, got {channel}")
    return channel


def _add_target_args(parser: argparse.ArgumentParser):
    target = parser.add_mutually_exclusive_group()
    target.add_argument('-l', '--light', metavar='INDEX', help='Light index on the bridge')
    target.add_argument('-n', '--name', help='Every light with this name')


def _add_rgb_args(parser: argparse.ArgumentParser):
    for channel in ('r', 'g', 'b'):
        parser.add_argument(channel, type=_channel, help=f'{channel.upper()} channel (0-255)')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='huectl',
        description='Control your Hue lights from the command line.',
    )
    parser.add_argument('--bridge', metavar='IP', help='Bridge IP (default: from settings)')
    parser.add_argument('--token', help='Bridge API token (default: from settings)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log bridge requests')
    sub = parser.add_subparsers(dest='command')

    sub.add_parser('toggle', help='Toggle all lights (default)')
    sub.add_parser('on', help='Turn all lights on')
    sub.add_parser('off', help='Turn all lights off')
    sub.add_parser('info', help='Display information about Hue lights')

    p = sub.add_parser('color', help='Set lights to a named palette color')
    p.add_argument('color', help='Name from the color palette')
    _add_target_args(p)

    p = sub.add_parser('rgb', help='Set lights to an RGB color')
    _add_rgb_args(p)
    _add_target_args(p)

    p = sub.add_parser('rename', help='Rename a light')
    p.add_argument('index', help='Light index on the bridge')
    p.add_argument('new_name', help='New light name')

    sub.add_parser('colors', help='List the color palette')

    p = sub.add_parser('add-color', help='Add or replace a palette color')
    p.add_argument('color', help='Color name')
    _add_rgb_args(p)

    p = sub.add_parser('remove-color', help='Remove a palette color')
    p.add_argument('color', help='Color name')

    p = sub.add_parser('convert', help='Show the xy/brightness for an RGB color')
    _add_rgb_args(p)
    p.add_argument('-m', '--model', help='Light model id to apply its gamut')

    sub.add_parser('discover', help='Find bridges on the local network')

    return parser


def _connect(args, settings: SettingsManager) -> HueBridge:
    bridge_ip = args.bridge or settings.bridge.bridge_ip
    if not bridge_ip:
        bridges = HueBridge.discover_bridges(timeout=settings.bridge.timeout)
        if not bridges:
            raise BridgeError("No bridge IP configured and none found by discovery.")
        bridge_ip = bridges[0]
        settings.bridge.bridge_ip = bridge_ip
        settings.save()
        timed_print(f"Using discovered bridge at {bridge_ip}")

    bridge = HueBridge(
        bridge_ip,
        args.token or settings.get_token(),
        timeout=settings.bridge.timeout,
        transition_time_ms=settings.bridge.transition_time_ms,
    )
    bridge.refresh_lights()
    return bridge


def _set_color(bridge: HueBridge, args, rgb: RGB):
    if args.light:
        bridge.set_color_by_index_and_rgb(args.light, rgb)
    elif args.name:
        bridge.set_color_by_name_and_rgb(args.name, rgb)
    else:
        bridge.set_all_by_rgb(rgb)


def _run_offline(args, settings: SettingsManager) -> bool:
    """Handle commands that do not talk to a bridge. Returns True if handled."""
    if args.command == 'colors':
        palette = settings.load_palette()
        if not palette:
            print(f"No colors defined in {settings.palette_file}")
        for name, rgb in palette.items():
            print(f"{name}: {rgb.r} {rgb.g} {rgb.b} ({rgb.as_hex()})")
    elif args.command == 'add-color':
        palette = settings.load_palette().with_color(args.color, RGB(args.r, args.g, args.b))
        settings.save_palette(palette)
        timed_print(f"Saved color '{args.color}' to {settings.palette_file}")
    elif args.command == 'remove-color':
        palette = settings.load_palette()
        if args.color not in palette:
            raise PaletteError(f"Color value '{args.color}' not set.")
        settings.save_palette(palette.without_color(args.color))
        timed_print(f"Removed color '{args.color}'")
    elif args.command == 'convert':
        point = from_rgb(RGB(args.r, args.g, args.b))
        print(f"xy: {point.xy_string()}  brightness: {point.brightness}")
        if args.model:
            gamut_class = gamut_class_for_model(args.model)
            if apply_model_gamut(point, args.model) is None:
                print(f"Model {args.model}: unknown, no gamut applied")
            else:
                print(f"Model {args.model} (gamut {gamut_class}): xy: {point.xy_string()}")
    elif args.command == 'discover':
        bridges = HueBridge.discover_bridges(timeout=settings.bridge.timeout)
        if not bridges:
            print("No bridges found")
        for ip in bridges:
            print(ip)
    else:
        return False
    return True


def run(args, settings: SettingsManager):
    if _run_offline(args, settings):
        return

    bridge = _connect(args, settings)
    command = args.command or 'toggle'

    if command == 'toggle':
        state = bridge.toggle_lights()
        timed_print(f"Lights turned {'on' if state else 'off'}")
    elif command in ('on', 'off'):
        changed = bridge.power(command == 'on')
        timed_print(f"Turned {command} {changed} light(s)")
    elif command == 'info':
        bridge.print_info()
    elif command == 'color':
        palette: NamedColorPalette = settings.load_palette()
        if args.light:
            bridge.set_color_by_index_and_color(args.light, args.color, palette)
        elif args.name:
            bridge.set_color_by_name_and_color(args.name, args.color, palette)
        else:
            bridge.set_all_by_color(args.color, palette)
    elif command == 'rgb':
        _set_color(bridge, args, RGB(args.r, args.g, args.b))
    elif command == 'rename':
        bridge.rename_light(args.index, args.new_name)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)
    settings = SettingsManager.get_instance()

    try:
        run(args, settings)
    except (HueError, PaletteError, DomainError, ValueError) as e:
        timed_print(f"Error: {e}", file=sys.stderr)
        return 1
    except requests.exceptions.RequestException as e:
        timed_print(f"Could not reach bridge: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        timed_print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
