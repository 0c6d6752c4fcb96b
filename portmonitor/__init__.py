"""
PortMonitor - checks which TCP ports answer on the local host's
network-facing IPv4 addresses and reports open ones to chat webhooks.
"""

__version__ = "1.0.0"
