#!/usr/bin/env python3
"""
PortMonitor - reports TCP ports that are still open on this host.

Checks every non-loopback IPv4 address of the machine and posts the open
ports to Slack and/or MS Teams webhooks.

Usage:
    python portmonitor.py params --range 80-1024 --webhook https://hooks.slack.com/...
    python portmonitor.py properties --file ports.properties --list portlist.web
"""

from portmonitor.main import main

if __name__ == "__main__":
    main()
