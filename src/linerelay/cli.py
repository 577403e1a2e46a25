#!/usr/bin/env python3
"""
linerelay: connect to a TCP endpoint and relay lines between it and the terminal

Lines typed on standard input are sent to the remote end, lines received are written to standard
output. The session ends when standard input ends or the remote end closes the connection.
Ending standard input closes the connection at once, so replies still in flight are not shown;
use the relay interactively and end input (Ctrl-D) once the replies have arrived.

Usage examples
──────────────
  linerelay example.com 7
  linerelay --timeout=3s --network=tcp6 localhost 2323
  linerelay --verbose mail.example.com smtp
"""
import argparse
import logging
import sys

from configobj import ConfigObjError

from linerelay import coordinator
from linerelay.config.config import load_config, relay_config, ConfigurationError
from linerelay.connector.socketconn import networks

logger = logging.getLogger(__name__)


def _setup_logging(level) -> None:
    # standard output carries the relayed lines, so log to standard error
    logging.basicConfig(level=level, stream=sys.stderr,
                        format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
                        datefmt="%H:%M:%S")


def log_level(args, conf) -> int:
    if args.verbose:
        return logging.DEBUG
    if args.quiet:
        return logging.WARNING
    return getattr(logging, conf['log_level'])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linerelay",
        description="Relay lines between the terminal and a TCP endpoint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("host", metavar="HOST", help="host name or address to connect to")
    parser.add_argument("port", metavar="PORT", help="port number or service name")
    parser.add_argument(
        "--timeout", metavar="DURATION", default=None,
        help="timeout to connect, such as 10s, 500ms or 1m (default: 10s)",
    )
    parser.add_argument(
        "--network", choices=sorted(networks), default=None,
        help="network type (default: tcp)",
    )
    parser.add_argument(
        "--config", metavar="FILE", default=None,
        help="configuration file overriding ~/linerelay.cfg",
    )
    parser.add_argument(
        "--fatal-on-close", action="store_true", default=None,
        help="exit with a failure status when either side closes the connection",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    return parser


def run_cli(argv=None) -> int:
    """
    Parses the command line, then runs the session.
    :return: the exit status
    """
    args = build_parser().parse_args(argv)

    try:
        conf = load_config(local_file=args.config)
    except (ConfigObjError, IOError) as e:
        _setup_logging(logging.INFO)
        logger.error("invalid configuration: %s" % e)
        return coordinator.EXIT_USAGE
    _setup_logging(log_level(args, conf))

    try:
        config = relay_config(args.host, args.port, conf, timeout=args.timeout, network=args.network,
                              fatal_on_close=args.fatal_on_close)
    except ConfigurationError as e:
        logger.error(str(e))
        return coordinator.EXIT_USAGE

    logger.debug("connecting to %s over %s, timeout %ss" %
                 (config.endpoint, config.endpoint.network, config.timeout))
    return coordinator.run(config)


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
