import argparse
import asyncio
import json
import sys

from .client import send_command
from .core.exceptions import ClientError, SecurityError
from .core.logging_setup import setup_logger
from .handlers.commands import CommandId
from .host import FileHost
from .io.comm_dir import communication_dir_path, ensure_communication_directory
from .utils.config import SETTINGS


def _parse_arg(text: str):
    """Command-line args are JSON where possible (numbers), else strings."""
    try:
        return json.loads(text)
    except ValueError:
        return text


# ---------- directory ----------

def cmd_path(args):
    print(communication_dir_path(SETTINGS))


def cmd_init(args):
    try:
        comm_dir = ensure_communication_directory(SETTINGS)
    except SecurityError as e:
        raise SystemExit(str(e))
    print(comm_dir.path)


# ---------- host & client ----------

def cmd_serve(args):
    """Serve a text file to command clients until interrupted."""
    host = FileHost(args.file, SETTINGS)
    try:
        host.runner.initialize()
    except SecurityError as e:
        raise SystemExit(str(e))
    print(f"[serve] {host.path} via {host.runner.comm_dir.path}")
    try:
        asyncio.run(host.serve())
    except KeyboardInterrupt:
        return


def cmd_send(args):
    """Client for a running host."""
    try:
        comm_dir = ensure_communication_directory(SETTINGS)
    except SecurityError as e:
        raise SystemExit(str(e))

    try:
        result = asyncio.run(
            send_command(
                comm_dir,
                args.command,
                [_parse_arg(a) for a in args.args],
                return_output=args.output,
                wait_for_finish=not args.no_wait,
                timeout=args.timeout,
            )
        )
    except ClientError as e:
        raise SystemExit(f"[send] {e}")
    if args.output:
        print(json.dumps(result, indent=2))


# ---------- arg parsing ----------

def build_parser():
    ap = argparse.ArgumentParser(
        prog="cmdserver", description="File-based command channel for driving an editor"
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("path", help="Print the communication directory path")
    p.set_defaults(func=cmd_path)

    i = sub.add_parser("init", help="Create and validate the communication directory")
    i.set_defaults(func=cmd_init)

    s = sub.add_parser("serve", help="Serve a text file to command clients")
    s.add_argument("file", help="text file to edit")
    s.set_defaults(func=cmd_serve)

    c = sub.add_parser("send", help="Send a command to a running host")
    c.add_argument("command", help="command id", choices=[cid.value for cid in CommandId], metavar="command")
    c.add_argument("args", nargs="*", help="command arguments (1-based line numbers)")
    c.add_argument("--output", action="store_true", help="print the command's return value")
    c.add_argument("--no-wait", action="store_true", help="do not wait for the command to finish")
    c.add_argument("--timeout", type=float, default=SETTINGS.client_timeout_s)
    c.set_defaults(func=cmd_send)

    return ap


def main(argv=None):
    setup_logger()
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    sys.exit(main())
