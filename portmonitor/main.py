import argparse
import asyncio
import logging
import sys
from typing import Dict, List, Optional

from .config import ConfigResolver, PortSelectors, ScanPlan
from .errors import ConfigError
from .network import discover_addresses, get_hostname
from .notifiers.registry import NotifierRegistry
from .orchestrator import ScanOrchestrator
from .properties import read_properties_file
from .scanner import PortScanner
from .ui import MonitorUI, setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_USAGE = 2
EXIT_PORTS_OPEN = 10

PROG = "portmonitor"


def _add_common_arguments(parser: argparse.ArgumentParser, noun: str):
    parser.add_argument("--start", default="", help=f"{noun} start port")
    parser.add_argument("--end", default="", help=f"{noun} end port")
    parser.add_argument("--range", dest="port_range", default="", help=f"{noun} port range (e.g. 80-1024)")
    parser.add_argument("--list", dest="port_list", default="", help=f"{noun} port list (e.g. 22,80,443)")
    parser.add_argument("--webhook", "--slack", dest="webhook", default="",
                        help="Webhook URL for messages to Slack")
    parser.add_argument("--msteams", default="", help="Webhook URL for messages to MS Teams")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Connect timeout per probe in seconds (Default: network stack default)")
    parser.add_argument("--debug", action="store_true", help="Activates debug output")
    parser.add_argument("--verify", action="store_true",
                        help="Send a message to the webhooks even if no port is open")


def build_parsers() -> Dict[str, argparse.ArgumentParser]:
    params = argparse.ArgumentParser(
        prog=f"{PROG} params",
        description="Configuration over params: flags hold the ports."
    )
    _add_common_arguments(params, "Literal")

    properties = argparse.ArgumentParser(
        prog=f"{PROG} properties",
        description="Configuration for properties file: flags name the properties holding the ports."
    )
    properties.add_argument("--file", default="", help="Properties file (Required)")
    _add_common_arguments(properties, "Property name of the")

    return {"params": params, "properties": properties}


def resolve_plan(command: str, args: argparse.Namespace) -> ScanPlan:
    selectors = PortSelectors(
        port_range=args.port_range,
        port_list=args.port_list,
        start=args.start,
        end=args.end,
    )
    options = dict(
        notify_target=args.webhook or None,
        teams_target=args.msteams or None,
        verify_mode=args.verify,
        debug=args.debug,
        timeout=args.timeout,
    )

    if command == "properties":
        if not args.file:
            raise ConfigError("The properties file must be specified for properties configuration.")
        resolver = ConfigResolver(read_properties_file(args.file))
    else:
        resolver = ConfigResolver()
    return resolver.resolve(selectors, **options)


def run(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    ui = MonitorUI()

    # 1. Command selection
    if not argv or (len(argv) == 1 and "help" in argv[0]):
        ui.print_usage(PROG)
        return EXIT_USAGE

    command = argv[0]
    parsers = build_parsers()
    if command not in parsers:
        ui.show_unknown_command(argv)
        ui.print_usage(PROG)
        return EXIT_USAGE

    parser = parsers[command]
    try:
        args = parser.parse_args(argv[1:])
    except SystemExit:
        return EXIT_USAGE

    setup_logging(args.debug)

    # 2. Configuration
    try:
        plan = resolve_plan(command, args)
    except ConfigError as e:
        ui.show_config_error(e, parser)
        return EXIT_CONFIG_ERROR

    # 3. Scan
    hostname = get_hostname()
    addresses = discover_addresses()
    if not addresses:
        logger.warning("No non-loopback IPv4 address found, nothing to scan.")

    orchestrator = ScanOrchestrator(
        PortScanner(timeout=plan.timeout),
        NotifierRegistry.from_plan(plan, hostname),
        hostname
    )
    ui.display_start(hostname, addresses)
    result = asyncio.run(orchestrator.run(plan, addresses))
    ui.display_results(result)

    # 4. Notification never changes the exit code
    orchestrator.notify(plan, result)

    return EXIT_PORTS_OPEN if result.any_open else EXIT_OK


def main():
    try:
        code = run()
    except KeyboardInterrupt:
        MonitorUI().console.print("\n[yellow]Scan interrupted by user.[/yellow]")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
