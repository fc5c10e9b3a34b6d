"""CLI for StylePass — score, generate (OpenAI or offline), serve, config."""

import argparse
import logging
import sys

from rich import print
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .analyzer import analyze
from .config import DEFAULTS, coerce_value, load_config, save_config
from .generator import GenerationError, LocalGenerator
from .llm import OpenAIGenerator
from .validation import ValidationError, parse_generation_request

logger = logging.getLogger(__name__)

def _yes_no(flag):
    return "[green]yes[/green]" if flag else "[dim]no[/dim]"

def print_report(report):
    color = report.color
    header = f"[{color}]Score: {report.score} / 100 — {report.grade.label}[/]"
    body = (
        f"Length: {report.length}\n"
        f"Entropy: {report.entropy_display} bits\n"
        f"Estimated crack time: {report.crack_time}"
    )
    print(Panel(body, title=header))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Lowercase")
    table.add_column("Uppercase")
    table.add_column("Digits")
    table.add_column("Special")
    table.add_row(
        _yes_no(report.has_lowercase),
        _yes_no(report.has_uppercase),
        _yes_no(report.has_digit),
        _yes_no(report.has_special),
    )
    print(table)

    for remark in report.warnings:
        if remark.positive:
            print(f"[green] ✓ {remark.message}[/green]")
        else:
            print(f"[yellow] • {remark.message}[/yellow]")

def cmd_score(args):
    print_report(analyze(args.password))
    return 0

def cmd_generate(args):
    settings = load_config()
    body = {
        "pattern": args.style,
        "length": args.length or int(settings.get("default_length", 16)),
        "requirements": {
            "uppercase": not args.no_upper,
            "lowercase": not args.no_lower,
            "numbers": not args.no_digits,
            "special": not args.no_special,
        },
    }
    try:
        req = parse_generation_request(body)
    except ValidationError as e:
        for err in e.errors:
            print(f"[red]{escape(err)}[/red]")
        return 1
    if args.offline:
        generator = LocalGenerator()
    else:
        generator = OpenAIGenerator.from_settings(settings)
    logger.debug("Generating with %s (length=%d)", type(generator).__name__, req.length)
    try:
        candidates = generator.generate(req.style, req.length, req.requirements)
    except GenerationError as e:
        print(f"[red]Failed to generate passwords: {escape(str(e))}[/red]")
        return 1
    for i, c in enumerate(candidates):
        print(f"\n[bold green]Password #{i+1}:[/bold green] {escape(c.password)}")
        if c.explanation:
            print(f"[dim]{escape(c.explanation)}[/dim]")
        print_report(analyze(c.password))
    return 0

def cmd_serve(args):
    from .web import create_app

    app = create_app()
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0

def cmd_config_show(args):
    cfg = load_config()
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting")
    table.add_column("Value")
    for key in sorted(cfg):
        value = cfg[key]
        if key == "openai_api_key":
            value = "(set)" if value else "(not set)"
        table.add_row(key, str(value))
    print(table)
    return 0

def cmd_config_set(args):
    try:
        value = coerce_value(args.key, args.value)
    except KeyError:
        print(f"[red]Unknown setting: {args.key}. Known: {', '.join(sorted(DEFAULTS))}[/red]")
        return 1
    except ValueError:
        print(f"[red]Invalid value for {args.key}: {args.value}[/red]")
        return 1
    cfg = load_config()
    cfg[args.key] = value
    path = save_config(cfg)
    print(f"[green]Saved {args.key} to:[/green] {path}")
    return 0

def build_parser():
    parser = argparse.ArgumentParser(prog="stylepass")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sc = sub.add_parser("score", help="Score a password")
    sc.add_argument("password", type=str, help="Password to evaluate (wrap in quotes)")
    sc.set_defaults(func=cmd_score)

    gen = sub.add_parser("generate", help="Generate three passwords in a described style")
    gen.add_argument("style", type=str, help="Describe the style you want (wrap in quotes)")
    gen.add_argument("--length", type=int, default=None, help="Password length")
    gen.add_argument("--no-upper", action="store_true", help="Disable uppercase")
    gen.add_argument("--no-lower", action="store_true", help="Disable lowercase")
    gen.add_argument("--no-digits", action="store_true", help="Disable digits")
    gen.add_argument("--no-special", action="store_true", help="Disable special characters")
    gen.add_argument("--offline", action="store_true", help="Use the local generator instead of OpenAI")
    gen.set_defaults(func=cmd_generate)

    srv = sub.add_parser("serve", help="Run the JSON API")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=5000)
    srv.add_argument("--debug", action="store_true")
    srv.set_defaults(func=cmd_serve)

    cfg = sub.add_parser("config", help="Show or change settings")
    csub = cfg.add_subparsers(dest="ccmd", required=True)
    c_show = csub.add_parser("show", help="Show current settings")
    c_show.set_defaults(func=cmd_config_show)
    c_set = csub.add_parser("set", help="Change a setting")
    c_set.add_argument("key", type=str)
    c_set.add_argument("value", type=str)
    c_set.set_defaults(func=cmd_config_set)

    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    return args.func(args)

if __name__ == "__main__":
    sys.exit(main())
