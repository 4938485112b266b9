"""CLI for rendering log templates and single log lines."""
import argparse
import sys

from logtail.core.format_errors import MalformedTemplateError
from logtail.core.logging_config import LoggingConfig
from logtail.core.renderer import render
from logtail.core.verbs import normalize
from logtail.services.log_line_formatter import LogLineFormatter


def cmd_normalize(args):
    """Print the normalized template and its slot count."""
    try:
        normalized = normalize(args.template)
    except MalformedTemplateError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    print(normalized.text)
    print(f"slots: {normalized.slots}")
    return 0


def cmd_render(args):
    """Render a template with a serialized payload."""
    result = render(args.template, args.payload)
    print(result.text)
    if not result.ok:
        print(result.error.message, file=sys.stderr)
        return 1
    return 0


def cmd_line(args):
    """Format one log row the way the tailer prints it."""
    row = {
        "details": args.details,
        "tstamp": args.tstamp,
        "IP": args.ip,
        "log_data": args.log_data,
    }
    formatter = LogLineFormatter()
    formatter.verbose = args.verbose
    print(formatter.format_row(row))
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="logtail")
    p.add_argument("--log-level", help="Override the configured log level")
    sub = p.add_subparsers(dest="cmd")
    s = sub.add_parser("normalize", help="Rewrite template verbs to %%s")
    s.add_argument("template")
    s.set_defaults(func=cmd_normalize)
    s = sub.add_parser("render", help="Render a template with a PHP-serialized payload")
    s.add_argument("template")
    s.add_argument("payload", nargs="?", default="")
    s.set_defaults(func=cmd_render)
    s = sub.add_parser("line", help="Format a single log row")
    s.add_argument("--details", required=True, help="Message template")
    s.add_argument("--tstamp", required=True, help="Unix timestamp")
    s.add_argument("--ip", default="", help="Client IP address")
    s.add_argument("--log-data", default="", help="PHP-serialized arguments")
    s.add_argument("--verbose", action="store_true", help="Print the row even if it cannot be rendered")
    s.set_defaults(func=cmd_line)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if args.log_level:
        LoggingConfig.set_module_level("logtail", args.log_level)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
