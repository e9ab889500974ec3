"""
Command line entry point.

Examples:
    python -m adoption_threshold --parametrization 1 --mode none --i-max 2400
    python -m adoption_threshold --parametrization 1 --mode partial --i-max 2200 --set efficiency_likelihood=0.25
    python -m adoption_threshold scenario.json -v
"""

import argparse
import logging
import sys

from .errors import DomainError, ThresholdModelError
from .scenarios import Scenario, load_scenario, parametrization
from .threshold import ThresholdSearch
from .types import UncertaintyMode


def _parse_override(text: str):
    key, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected key=value, got '{text}'")
    try:
        return key.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Value of '{key}' must be a number") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adoption_threshold",
        description="Investment threshold for green technology adoption under compliance risk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("config_file", nargs="?", help="Path to JSON scenario file")
    parser.add_argument("--parametrization", type=int, default=1, choices=[1, 2, 3],
                        help="Preset from Table 1 when no config file is given")
    parser.add_argument("--mode", default=UncertaintyMode.NONE.value,
                        choices=[m.value for m in UncertaintyMode])
    parser.add_argument("--i-max", type=int, default=2500, help="First investment cost of the scan")
    parser.add_argument("--set", dest="overrides", action="append", default=[],
                        type=_parse_override, metavar="FIELD=VALUE",
                        help="Override a model parameter, e.g. risk_aversion=2")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.config_file:
            scenario = load_scenario(args.config_file)
            if args.overrides:
                scenario = scenario.with_parameters(**dict(args.overrides))
        else:
            scenario = Scenario(
                parameters=parametrization(args.parametrization, **dict(args.overrides)),
                mode=args.mode,
                i_max=args.i_max,
                name=f"parametrization-{args.parametrization}",
            )
        result = ThresholdSearch(scenario).run()
    except DomainError as e:
        print(f"Invalid scenario: {e}", file=sys.stderr)
        return 2
    except ThresholdModelError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    for line in result.summary():
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
