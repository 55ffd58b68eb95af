#!/usr/bin/env python3
"""americano - prevent the system from sleeping for a while or while a process runs"""

import sys
import argparse

from awake.session import MonitorSession
from awake.selector import is_numeric
from awake.timer import CountdownTimer
from awake.errors import AmericanoError, ArgumentError
from awake.config import config
from awake import ui


MODES = ('pid', 'time', 'find', 'config')

EXAMPLES = """
examples:
  americano time 30        Prevent sleep for 30 minutes
  americano pid 12345      Monitor process with PID 12345
  americano 12345          Same as 'pid 12345'
  americano pid npm        Search for 'npm' processes and select one
  americano -d pid node    Monitor a 'node' process, also prevent display sleep
  kill $(americano find 'node server')
                           Resolve a search term to a PID on stdout
"""


class ArgumentParser(argparse.ArgumentParser):
    """argparse that raises ArgumentError instead of exiting"""

    def error(self, message):
        self.print_usage(sys.stderr)
        raise ArgumentError(message)


class AmericanoCLI:
    """Main CLI application"""

    def __init__(self, session=None, timer=None):
        self.session = session or MonitorSession()
        self.timer = timer or CountdownTimer()

    def run(self, args) -> int:
        """Main entry point, returns the exit code"""
        parser = self.create_parser()
        parsed_args = parser.parse_args(self.normalize_args(args))

        if not hasattr(parsed_args, 'func'):
            parser.error("Specify a mode: 'time', 'pid', 'find' or 'config'")

        return parsed_args.func(parsed_args)

    @staticmethod
    def normalize_args(args):
        """A bare PID without a mode means 'pid <PID>'"""
        args = list(args)
        for idx, arg in enumerate(args):
            if arg.startswith('-'):
                continue
            if arg not in MODES and is_numeric(arg):
                args.insert(idx, 'pid')
            break
        return args

    def create_parser(self):
        """Create argument parser"""
        parser = ArgumentParser(
            description='Prevent the system from sleeping, for a number of minutes '
                        'or while a process is running',
            prog='americano',
            epilog=EXAMPLES,
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        parser.add_argument(
            '-d', '--display',
            action=argparse.BooleanOptionalAction,
            default=config.prevent_display_sleep,
            help='also prevent the display from sleeping (--no-display overrides AMERICANO_PREVENT_DISPLAY_SLEEP)'
        )

        subparsers = parser.add_subparsers(title='modes', dest='mode')

        pid_parser = subparsers.add_parser('pid', help='Prevent sleep while a process is running')
        pid_parser.add_argument('target', help='PID, or a search term matched against full command lines')
        pid_parser.set_defaults(func=self.cmd_pid)

        time_parser = subparsers.add_parser('time', help='Prevent sleep for a number of minutes')
        time_parser.add_argument('minutes', type=int, help='Minutes to stay awake')
        time_parser.set_defaults(func=self.cmd_time)

        find_parser = subparsers.add_parser('find', help='Resolve a search term to a single PID')
        find_parser.add_argument('term', help='PID, or a search term matched against full command lines')
        find_parser.set_defaults(func=self.cmd_find)

        config_parser = subparsers.add_parser('config', help='Show configuration')
        config_parser.set_defaults(func=self.cmd_config)

        return parser

    # Command implementations

    def cmd_pid(self, args) -> int:
        """Keep awake while a process runs"""
        self.session.run(args.target, prevent_display_sleep=args.display)
        return 0

    def cmd_time(self, args) -> int:
        """Keep awake for a number of minutes"""
        self.timer.run(args.minutes, prevent_display_sleep=args.display)
        return 0

    def cmd_find(self, args) -> int:
        """Print the selected PID on stdout"""
        ui.emit_result(self.session.resolve_pid(args.term))
        return 0

    def cmd_config(self, args) -> int:
        ui.display_config(config)
        return 0


def main(argv=None):
    """Main entry point"""
    try:
        cli = AmericanoCLI()
        exit_code = cli.run(sys.argv[1:] if argv is None else argv)
    except AmericanoError as e:
        if e.exit_code == 0:
            ui.print_info(str(e))
        else:
            ui.print_error(str(e))
        exit_code = e.exit_code
    except KeyboardInterrupt:
        ui.err_console.print("\n[dim]Interrupted[/dim]")
        exit_code = 130
    except Exception as e:
        ui.print_error(f"Fatal error: {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
