import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .auditlog import AuditLog
from .config import Config
from .exceptions import PhishcheckConfigError, UsageError
from .probe import CertificateProber
from .render import render_banner, render_json, render_pretty
from .scanner import scan
from .scoring import exit_code_for
from .utils import ensure_scheme

USAGE_EXIT_CODE = 2
PROMPT = "🔗 Enter the URL to check: "

class _UsageAction(argparse.Action):
    """-h/--help: print usage and exit with the usage-error code."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        parser.exit(USAGE_EXIT_CODE)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phishcheck",
        description="Check a URL for common phishing indicators.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-u", "--url", help="URL to analyze")
    parser.add_argument("-o", "--output", choices=("json", "pretty"), default="pretty",
                        help="Output format: json|pretty (default: pretty)")
    parser.add_argument("--noninteractive", action="store_true", help="Do not prompt; fail if URL missing")
    parser.add_argument("-h", "--help", action=_UsageAction, help="Show this help")
    parser.add_argument("-v", "--version", action="version", version=__version__, help="Print version")
    return parser

def configure_logging(level) -> None:
    lvl = getattr(logging, str(level).upper(), logging.WARNING)
    if not isinstance(lvl, int):
        lvl = logging.WARNING
    logging.basicConfig(level=lvl, format="%(levelname)s: %(message)s", stream=sys.stderr)

def resolve_url(args: argparse.Namespace) -> str:
    if args.url and args.url.strip():
        return args.url
    if args.noninteractive:
        raise UsageError("--url is required in noninteractive mode.")
    while True:
        try:
            url = input(PROMPT)
        except EOFError:
            raise UsageError("no URL provided.")
        if url.strip():
            return url

def emit(text: str) -> None:
    """Print text the terminal cannot encode (e.g. surrogates from argv) as backslash escapes."""
    encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
    print(text.encode(encoding, "backslashreplace").decode(encoding))

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    try:
        config = Config()
        prober = CertificateProber.from_config(config)
    except (PhishcheckConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return USAGE_EXIT_CODE
    configure_logging(config.get("logging.level"))

    try:
        url = resolve_url(args)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return USAGE_EXIT_CODE

    pretty = args.output == "pretty"
    if pretty:
        emit(render_banner(__version__, color=sys.stdout.isatty()))
        emit(f"🔍 Analyzing: {ensure_scheme(url)}")

    report = scan(url, prober, api_key=config.reputation_api_key())

    audit = AuditLog.from_config(config)
    logged = audit.append(report)

    if pretty:
        emit(render_pretty(report, audit.log_file, logged))
    else:
        print(render_json(report))

    # 0 => low risk, 1 => medium risk, 2 => high risk
    return exit_code_for(report.risk_level)

if __name__ == "__main__":
    sys.exit(main())
