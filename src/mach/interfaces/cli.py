# ruff: noqa: T201

import argparse
import sys
from datetime import timedelta

from result import Err, Ok

from mach.core import ops
from mach.core.models import BACKLOG_COLUMNS, WEEK_STARTS, Status
from mach.interfaces.tui import endpoint as tui
from mach.interfaces.tui.terminal import RenderError, TerminalSetupError
from mach.interfaces.tui.week import start_of_week
from mach.io.std_io import print_task, print_tasks
from mach.storage import Store
from mach.util.logger import setup_logger, setup_mode
from mach.util.time import parse_date

logger = setup_logger("mach.cli", is_stream=True, is_file=False)


def _store(args: argparse.Namespace) -> Store:
    return ops.open_store(args.data_path)


def cmd_add(args: argparse.Namespace) -> int:
    try:
        st = _store(args)
        scheduled_on = None
        if args.today:
            scheduled_on = ops.today()
        elif args.date is not None:
            match parse_date(args.date):
                case Ok(d):
                    scheduled_on = d
                case Err(e):
                    print(f"Error: {e}", file=sys.stderr)
                    return 1
        t = ops.add_task(
            args.title,
            scheduled_on=scheduled_on,
            backlog_column=args.backlog - 1,
            st=st,
        )
        print(t.id)
    except ops.OpsError as e:
        _msg = f"An error occurred while adding a task: {e!s}"
        logger.exception(_msg)
        return 1
    else:
        return 0


def cmd_list(args: argparse.Namespace) -> int:
    try:
        st = _store(args)
        if args.backlog:
            tasks = ops.list_unscheduled(st=st)
        else:
            first = start_of_week(ops.today(), ops.week_start_preference(st=st))
            first += timedelta(days=7 * args.week)
            tasks = ops.list_scheduled(first, first + timedelta(days=6), st=st)
    except ops.OpsError as e:
        _msg = f"An error occurred while listing tasks: {e!s}"
        logger.exception(_msg)
        return 1

    if not args.done:
        tasks = [t for t in tasks if t.status != "done"]
    print_tasks(tasks)
    return 0


def _set_status(args: argparse.Namespace, status: Status) -> int:
    try:
        st = _store(args)
        t = ops.set_status(ops.resolve_id(args.id, st=st), status, st=st)
    except ops.OpsError as e:
        _msg = f"An error occurred while updating status: {e!s}"
        logger.exception(_msg)
        return 1
    print_task(t)
    return 0


def cmd_done(args: argparse.Namespace) -> int:
    return _set_status(args, "done")


def cmd_undo(args: argparse.Namespace) -> int:
    return _set_status(args, "pending")


def cmd_rm(args: argparse.Namespace) -> int:
    try:
        st = _store(args)
        tid = ops.resolve_id(args.id, st=st)
        ops.delete_task(tid, st=st)
    except ops.OpsError as e:
        _msg = f"An error occurred while removing a task: {e!s}"
        logger.exception(_msg)
        return 1
    print(tid)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    try:
        st = _store(args)
        if args.value is None:
            print(ops.week_start_preference(st=st))
        else:
            print(ops.set_week_start_preference(args.value, st=st))
    except ops.OpsError as e:
        _msg = f"An error occurred while updating config: {e!s}"
        logger.exception(_msg)
        return 1
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    try:
        return tui.run(args)
    except (ops.OpsError, TerminalSetupError, RenderError) as e:
        _msg = f"An error occurred while running TUI: {e!s}"
        logger.exception(_msg)
        return 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mach", description="Weekly planning board for the terminal")
    p.add_argument("--debug", action="store_true", help="debug mode")
    p.add_argument("--data-path", help="task store path (*.db or *.yaml)")
    p.set_defaults(func=cmd_tui)
    sub = p.add_subparsers(dest="cmd")

    # add
    sp = sub.add_parser("add", help="add a task")
    sp.add_argument("title")
    when = sp.add_mutually_exclusive_group()
    when.add_argument("--date", help="schedule on date (YYYY-MM-DD)")
    when.add_argument("--today", action="store_true", help="schedule on today")
    sp.add_argument(
        "--backlog",
        type=int,
        choices=range(1, BACKLOG_COLUMNS + 1),
        default=1,
        help="backlog column for unscheduled tasks",
    )
    sp.set_defaults(func=cmd_add)

    # list
    sp = sub.add_parser("list", help="list tasks of this week")
    sp.add_argument("--backlog", action="store_true", help="list tasks in the backlog")
    sp.add_argument("--done", action="store_true", help="include completed tasks")
    sp.add_argument("--week", type=int, default=0, help="week offset from this week (e.g. -1, 1)")
    sp.set_defaults(func=cmd_list)

    # done / undo
    sp = sub.add_parser("done", help="mark done")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_done)

    sp = sub.add_parser("undo", help="mark pending again")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_undo)

    # rm
    sp = sub.add_parser("rm", help="remove a task")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_rm)

    # config
    sp = sub.add_parser("config", help="show or set preferences")
    csub = sp.add_subparsers(dest="key", required=True)
    csp = csub.add_parser("week-start", help="first day of the week")
    csp.add_argument("value", nargs="?", choices=WEEK_STARTS)
    csp.set_defaults(func=cmd_config)

    # tui
    sp = sub.add_parser("tui", help="run TUI (default)")
    sp.set_defaults(func=cmd_tui)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_mode(is_debug=args.debug)
    return args.func(args)  # type: ignore[no-any-return]


if __name__ == "__main__":
    sys.exit(main())
