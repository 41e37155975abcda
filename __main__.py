#!/usr/bin/env python3
"""
Numeric Input - command line entry point.
Validates numeric text against field constraints, replays typing and
pasting through the gatekeeper, or opens the PySide6 demo field.
"""
import argparse
import json
import sys
import time
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional
def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Numeric Input - numeric text gatekeeper and validator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python . --min 5 --check 4                          # INVALID, below minimum
  python . --accept-float --max-decimals 2 --type 1.234
  python . --min 0 --value 12 --paste -3              # paste denied
  python . --config field.json --check 10 --explain
  python . --gui --accept-float                       # PySide6 demo field
        """
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version="Numeric Input 1.0.0"
    )
    constraints = parser.add_argument_group("field constraints")
    constraints.add_argument("--config", type=str, help="JSON file with field settings")
    constraints.add_argument("--min", dest="min", type=str, help="Inclusive lower bound")
    constraints.add_argument("--max", dest="max", type=str, help="Inclusive upper bound")
    constraints.add_argument(
        "--accept-float",
        dest="acceptFloat",
        action="store_true",
        default=None,
        help="Accept decimal point and exponent notation"
    )
    constraints.add_argument("--min-decimals", dest="minDecimals", type=str,
                             help="Minimum digits after the decimal point")
    constraints.add_argument("--max-decimals", dest="maxDecimals", type=str,
                             help="Maximum digits after the decimal point")
    constraints.add_argument("--value", dest="value", type=str, help="Text the field starts with")
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--check", metavar="TEXT", help="Validate TEXT as the whole field content")
    actions.add_argument("--type", dest="type_text", metavar="TEXT",
                         help="Type TEXT one key at a time")
    actions.add_argument("--paste", metavar="TEXT", help="Paste TEXT into the field")
    actions.add_argument("--gui", action="store_true", help="Open the PySide6 demo field")
    actions.add_argument("--check-deps", "-c", action="store_true",
                         help="Check dependencies and exit")
    parser.add_argument("--explain", action="store_true",
                        help="With --check, list every failed constraint")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-dir", type=str, help="Directory for log files")
    return parser.parse_args(argv)
def check_dependencies() -> bool:
    """Check if the GUI dependencies are available."""
    required_packages = {
        'PySide6': ('PySide6', 'GUI framework for the demo field'),
    }
    missing_required = []
    print(f"Python version: {sys.version}")
    print(f"Python executable: {sys.executable}\n")
    for display_name, (import_name, description) in required_packages.items():
        try:
            module = __import__(import_name)
            if import_name == 'PySide6':
                from PySide6 import QtCore, QtWidgets, QtGui
            print(f"OK {display_name}: {description} (version: {getattr(module, '__version__', 'unknown')})")
        except ImportError as e:
            missing_required.append(f"{display_name} ({description})")
            print(f"ERROR {display_name}: {description} - MISSING")
            print(f"   Import error: {e}")
    if missing_required:
        print(f"\nMissing required dependencies:")
        for package in missing_required:
            print(f"   - {package}")
        print(f"\nTry installing with:")
        print(f"   {sys.executable} -m pip install PySide6")
        return False
    return True
def collect_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge the JSON settings file with command line overrides."""
    settings: Dict[str, Any] = {}
    if args.config:
        with open(args.config, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"{args.config} must contain a JSON object")
        settings.update(loaded)
    for key in ('min', 'max', 'acceptFloat', 'minDecimals', 'maxDecimals', 'value'):
        override = getattr(args, key)
        if override is not None:
            settings[key] = override
    return settings
def print_json(payload: Dict[str, Any]):
    print(json.dumps(payload, ensure_ascii=False))
def run_check(text: str, config, explain_issues: bool) -> int:
    from numeric_input import explain, on_value_changed
    verdict = on_value_changed(text, config)
    payload: Dict[str, Any] = {'text': text, 'verdict': verdict.to_dict()}
    if explain_issues:
        payload['issues'] = [
            {'field': issue.field, 'title': issue.title, 'message': issue.message}
            for issue in explain(text, config)
        ]
    print_json(payload)
    return 0 if verdict.is_valid else 1
def run_type(text: str, config) -> int:
    from numeric_input import NumericInputSession
    session = NumericInputSession(config)
    for key in text:
        allowed = session.key(key)
        print_json({'key': key, 'allowed': allowed, 'text': session.text})
    print_json({'text': session.text, 'verdict': session.verdict.to_dict()})
    return 0 if session.verdict.is_valid else 1
def run_paste(text: str, config) -> int:
    from numeric_input import NumericInputSession
    session = NumericInputSession(config)
    allowed = session.paste(text)
    print_json({'clipboard': text, 'allowed': allowed, 'text': session.text,
                'verdict': session.verdict.to_dict()})
    return 0 if allowed and session.verdict.is_valid else 1
def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the numeric input tool."""
    args = None
    try:
        args = parse_arguments(argv)
        if args.check_deps:
            if check_dependencies():
                print("\nAll dependencies are satisfied!")
                return 0
            print("\nSome dependencies are missing!")
            return 1
        from logger import LogCategory, setup_logger
        logger = setup_logger(log_dir=Path(args.log_dir) if args.log_dir else None,
                              debug=args.debug)
        from numeric_config import config_from_settings
        try:
            config = config_from_settings(collect_settings(args))
        except (ValueError, OSError) as e:
            logger.error("Invalid field configuration", exception=e, category=LogCategory.CONFIG)
            print(f"Configuration error: {e}")
            return 2
        logger.debug("Field configuration loaded", category=LogCategory.CONFIG,
                     config=config)
        if args.gui:
            if not check_dependencies():
                print("\nCannot open the demo field due to missing dependencies.")
                return 1
            from numeric_field import run_demo
            return run_demo(config)
        if args.type_text is not None:
            return run_type(args.type_text, config)
        if args.paste is not None:
            return run_paste(args.paste, config)
        text = args.check if args.check is not None else config.value
        return run_check(text, config, args.explain)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"\nCritical error in Numeric Input:")
        print(f"   {type(e).__name__}: {e}")
        if args is not None and args.debug:
            print(f"\nDebug traceback:")
            traceback.print_exc()
        else:
            print(f"\nRun with --debug for detailed error information")
        return 1
if __name__ == "__main__":
    start_time = time.time()
    exit_code = main()
    if '--debug' in sys.argv or '-d' in sys.argv:
        print(f"\nFinished in {time.time() - start_time:.3f} seconds", file=sys.stderr)
    sys.exit(exit_code)
