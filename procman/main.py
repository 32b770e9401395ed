import sys
import logging
from pathlib import Path
from typing import List, Optional

import setproctitle

from procman.config import effective_settings as config
from procman.log import resolve_level, setup_logging
from procman.management import (
    process_status,
    send_signal,
    to_signal_kind,
    write_pid,
)
from procman.supervisor import Supervisor

log = logging.getLogger("console")


def _parse_pids(args: List[str]) -> List[int]:
    pids = []
    for arg in args:
        try:
            pids.append(int(arg))
        except ValueError:
            raise ValueError(f"'{arg}' is not a process ID.") from None
    return pids


def handle_write_pid(args: List[str]) -> int:
    path = Path(args[0]) if args else Path(config.PID_FILE_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    write_pid(path)
    log.info(f"PID written to '{path}'.")
    return 0


def handle_status(args: List[str]) -> int:
    """Prints one line per PID; exits non-zero if any of them is not running."""
    pids = _parse_pids(args)
    all_running = True
    for pid in pids:
        status = process_status(pid)
        all_running = all_running and status == "running"
        print(f"{pid}\t{status}")
    return 0 if all_running else 1


def handle_signal(args: List[str]) -> int:
    if len(args) < 2:
        log.error("Usage: signal <NAME> <PID> [PID ...]")
        return 2
    kind = to_signal_kind(args[0])
    delivered = 0
    for pid in _parse_pids(args[1:]):
        if send_signal(pid, kind):
            delivered += 1
        else:
            log.warning(f"Process {pid} no longer exists.")
    log.info(f"SIG{kind.name} delivered to {delivered} process(es).")
    return 0 if delivered else 1


def handle_supervise(args: List[str]) -> int:
    pids = _parse_pids(args)
    if not pids:
        log.error("Usage: supervise <PID> [PID ...]")
        return 2
    setproctitle.setproctitle(config.PROCESS_TITLE)
    supervisor = Supervisor(pids)
    supervisor.install()
    supervisor.run()
    return 0


def print_help() -> int:
    print("Usage: procman <command> [args] [--verbose]")
    print("  write-pid [PATH]           Write this process's PID to PATH.")
    print("  status PID [PID ...]       Show whether each process is running.")
    print("  signal NAME PID [PID ...]  Send INT, TERM, TTIN, USR1, USR2 or HUP.")
    print("  supervise PID [PID ...]    Forward signals to and reap the given workers.")
    return 0


def execute_command(command: str, args: List[str]) -> int:
    """
    Executes a single command.

    :param command: The command name (e.g., 'status', 'signal').
    :param args: The remaining arguments.
    :return: The process exit code.
    """
    command_map = {
        "write-pid": handle_write_pid,
        "status": handle_status,
        "signal": handle_signal,
        "supervise": handle_supervise,
        "help": lambda _: print_help(),
    }

    handler = command_map.get(command)
    if handler is None:
        log.info(f"Unknown command: '{command}'. Type 'help' for a list of commands.")
        return 2

    try:
        return handler(args)
    except ValueError as e:
        # InvalidSignalKind is a ValueError too.
        log.error(str(e))
        return 2
    except Exception as e:
        log.error(f"Command '{command}' failed: {e}", exc_info=True)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """The main entry point for the console application."""
    argv = list(sys.argv[1:] if argv is None else argv)

    console_level = resolve_level(config.LOG_LEVEL)
    if "--verbose" in argv:
        argv.remove("--verbose")
        console_level = logging.DEBUG
    setup_logging(console_level)

    if not argv:
        return print_help()
    return execute_command(argv[0].lower(), argv[1:])


if __name__ == "__main__":
    sys.exit(main())
