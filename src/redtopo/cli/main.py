# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the RedTopo command-line interface."""

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from yachalk import chalk

from redtopo.compiler.build import CompilerError, compile_source, run_program, scan_source
from redtopo.compiler.diagnostics import render_all
from redtopo.compiler.semantic_analysis import SymbolTable
from redtopo.grammar.ll1_table import default_table
from redtopo.lexer.automaton import Automaton, AutomatonSpecError
from redtopo.runtime.snapshot import SNAPSHOT_SUFFIX, NetworkSnapshot, take_snapshot, write_snapshot
from redtopo.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    WorkspaceConfig,
    WorkspaceConfigError,
    find_config,
    load_config,
    resolve_automaton,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the RedTopo CLI."""
    parser = argparse.ArgumentParser(
        prog="redtopo",
        description="RedTopo: Ethernet topology description language",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to a workspace configuration file (default: {CONFIG_FILE_NAME} next to the source file)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Write a default workspace configuration",
        description=f"Create a commented {CONFIG_FILE_NAME} in a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize (default: current directory)",
    )

    # tokens subcommand
    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Print the tokens of a source file",
        description="Scan a source file and print one token per line.",
    )
    tokens_parser.add_argument("file", help="Source file to scan")

    # table subcommand
    table_parser = subparsers.add_parser(
        "table",
        help="Print the LL(1) parse table",
        description="Print or write the productions and the LL(1) parse table.",
    )
    table_parser.add_argument(
        "--output",
        default=None,
        help="Write the table to this file instead of printing it",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check a program without running it",
        description="Scan, parse and analyze a source file.",
    )
    check_parser.add_argument("file", help="Source file to check")

    # run subcommand
    run_parser = subparsers.add_parser(
        "run",
        help="Run a program",
        description="Compile and execute a source file, then print the resulting network.",
    )
    run_parser.add_argument("file", help="Source file to run")
    run_parser.add_argument(
        "--snapshot",
        nargs="?",
        const="",
        default=None,
        help="Write the final network as JSON (default path: the configured snapshot directory)",
    )
    run_parser.add_argument(
        "--serve",
        action="store_true",
        help="Launch the topology viewer after running",
    )
    run_parser.add_argument(
        "--port",
        type=int,
        default=8050,
        help="Port to run the viewer on (default: 8050)",
    )
    run_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind the viewer to (default: 127.0.0.1)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "tokens":
        return _cmd_tokens(args)
    if args.command == "table":
        return _cmd_table(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "run":
        return _cmd_run(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME

    if config_file.exists():
        print(
            f"Error: configuration already exists at '{config_file}'.",
            file=sys.stderr,
        )
        return 1

    config_file.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    print(f"Initialized RedTopo workspace at '{config_file}'.")
    return 0


def _cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens subcommand."""
    loaded = _load_source(args)
    if loaded is None:
        return 1
    path, source, config, automaton = loaded

    try:
        tokens = scan_source(source, automaton)
    except CompilerError as exc:
        _print_diagnostics(exc, source, path, config)
        return 1

    for token in tokens:
        print(f"{token.line:>4}:{token.column:<4} {token.type.name:<20} {token.lexeme}")
    return 0


def _cmd_table(args: argparse.Namespace) -> int:
    """Handle the table subcommand."""
    text = default_table().export()
    if args.output is None:
        print(text)
        return 0

    output = Path(args.output)
    try:
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1
    print(f"Table written to '{output}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    loaded = _load_source(args)
    if loaded is None:
        return 1
    path, source, config, automaton = loaded

    try:
        compiled = compile_source(source, automaton)
    except CompilerError as exc:
        _print_diagnostics(exc, source, path, config)
        return 1

    print(_format_symbols(compiled.symbols))
    print(_style(config, chalk.green, "No issues found."))
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    """Handle the run subcommand."""
    loaded = _load_source(args)
    if loaded is None:
        return 1
    path, source, config, automaton = loaded

    try:
        compiled = compile_source(source, automaton)
        env = run_program(compiled)
    except CompilerError as exc:
        _print_diagnostics(exc, source, path, config)
        return 1

    snapshot = take_snapshot(env, compiled.program.name)
    for line in snapshot.output:
        print(line)
    print(_format_snapshot(snapshot, config))

    if args.snapshot is not None:
        if args.snapshot:
            target = Path(args.snapshot)
        else:
            stem = path.name.split(".")[0]
            target = config.root / config.snapshot_directory / f"{stem}{SNAPSHOT_SUFFIX}"
        try:
            write_snapshot(snapshot, target)
        except OSError as exc:
            print(f"Error: cannot write snapshot '{target}': {exc}", file=sys.stderr)
            return 1
        print(f"Snapshot written to '{target}'.")

    if args.serve:
        from redtopo.webui.app import create_app

        print(f"Serving network view at http://{args.host}:{args.port}/")
        app = create_app(snapshot)
        app.run(host=args.host, port=args.port, debug=False)
    return 0


def _load_source(args: argparse.Namespace) -> tuple[Path, str, WorkspaceConfig, Automaton] | None:
    """Read the source file, its configuration and the automaton, reporting failures."""
    path = Path(args.file)
    try:
        config = load_config(Path(args.config)) if args.config else find_config(path.resolve())
        automaton = resolve_automaton(config)
    except (WorkspaceConfigError, AutomatonSpecError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    if args.no_color:
        config.color = False

    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return None
    return path, source, config, automaton


def _print_diagnostics(exc: CompilerError, source: str, path: Path, config: WorkspaceConfig) -> None:
    print(render_all(exc.diagnostics, source, str(path), color=config.color), file=sys.stderr)


def _style(config: WorkspaceConfig, painter: Callable[[str], str], text: str) -> str:
    return painter(text) if config.color else text


def _format_symbols(symbols: SymbolTable) -> str:
    """Summarize declared objects, one kind per line."""
    lines = [f"Máquinas: {', '.join(symbols.machines) or '-'}"]
    hubs = [f"{s.name}({s.ports}{', coaxial' if s.has_coaxial else ''})" for s in symbols.concentrators.values()]
    lines.append(f"Concentradores: {', '.join(hubs) or '-'}")
    cables = [f"{s.name}({s.length}m)" for s in symbols.coaxials.values()]
    lines.append(f"Coaxiales: {', '.join(cables) or '-'}")
    lines.append(f"Módulos: {', '.join(symbols.modules) or '-'}")
    return "\n".join(lines)


def _format_snapshot(snapshot: NetworkSnapshot, config: WorkspaceConfig) -> str:
    """Render the final network state as an indented report."""
    lines = [_style(config, chalk.bold, f"Red '{snapshot.program}'")]
    for machine in snapshot.machines:
        where = f"({machine.x}, {machine.y})" if machine.placed else "sin colocar"
        link = ""
        if machine.concentrator is not None:
            link = f" -> {machine.concentrator}[{machine.port}]"
        elif machine.coaxial is not None:
            link = f" -> {machine.coaxial}@{machine.position}m"
        lines.append(f"  máquina {machine.name} {where}{link}")
    for hub in snapshot.concentrators:
        where = f"({hub.x}, {hub.y})" if hub.placed else "sin colocar"
        lines.append(f"  concentrador {hub.name} {where} {hub.available}/{hub.ports} libres")
    for cable in snapshot.coaxials:
        where = f"({cable.x}, {cable.y}) {cable.direction.value}" if cable.placed and cable.direction else "sin colocar"
        state = _style(config, chalk.red, "completo") if cable.full else f"{len(cable.taps)} máquinas"
        lines.append(f"  coaxial {cable.name} {cable.length}m {where} {state}")
    return "\n".join(lines)
