import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from .config import ScanPlan
from .notifiers.registry import NotifierRegistry
from .scanner import PortScanner

logger = logging.getLogger(__name__)


@dataclass
class ProbeOutcome:
    """Result of one (address, port) probe"""
    address: str
    port: int
    is_open: bool


@dataclass
class ScanResult:
    """Aggregated outcome of one orchestration pass"""
    outcomes: List[ProbeOutcome] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)

    HEADER = "Port Monitor"

    def record(self, address: str, port: int, is_open: bool) -> ProbeOutcome:
        outcome = ProbeOutcome(address, port, is_open)
        self.outcomes.append(outcome)
        if is_open:
            self.lines.append(f"Port {port} for {address} is open.")
        return outcome

    @property
    def any_open(self) -> bool:
        return any(o.is_open for o in self.outcomes)

    @property
    def open_ports(self) -> List[ProbeOutcome]:
        return [o for o in self.outcomes if o.is_open]

    @property
    def message(self) -> str:
        return "\n".join([self.HEADER] + self.lines) + "\n"


class ScanOrchestrator:
    """
    Probes every configured port on every address, one at a time, and
    decides whether the result is worth a notification.
    """

    def __init__(self, scanner: PortScanner, notifiers: Optional[NotifierRegistry] = None, hostname: str = ""):
        self.scanner = scanner
        self.notifiers = notifiers if notifiers is not None else NotifierRegistry()
        self.hostname = hostname

    @staticmethod
    def iter_ports(plan: ScanPlan) -> Iterator[int]:
        """
        Range ports ascending, then list ports in their configured order.
        Both are walked if both happen to be set.
        """
        if plan.ports_range:
            start, end = plan.ports_range
            yield from range(start, end + 1)
        if plan.ports_list:
            yield from plan.ports_list

    async def run(self, plan: ScanPlan, addresses: Sequence[str]) -> ScanResult:
        result = ScanResult()
        for address in addresses:
            for port in self.iter_ports(plan):
                try:
                    is_open = await self.scanner.probe(address, port, plan.timeout)
                except Exception as e:
                    # Not distinguishable from a closed port at this level
                    logger.debug("Probe %s:%d raised %r, treating as closed", address, port, e)
                    is_open = False

                result.record(address, port, is_open)
                if is_open:
                    logger.info("Port %d for %s is open.", port, address)
                elif plan.debug:
                    logger.debug("Port %d for %s is not open.", port, address)

        if result.any_open:
            logger.warning("There are open ports! Check your processes on the machine.")
        return result

    def should_notify(self, plan: ScanPlan, result: ScanResult) -> bool:
        return (result.any_open or plan.verify_mode) and plan.has_notify_target

    def title(self) -> str:
        return f"Ports is still open on {self.hostname}"

    def notify(self, plan: ScanPlan, result: ScanResult) -> int:
        """
        Hands the result to every registered sink if warranted.
        Returns the number of successful deliveries.
        """
        if not self.should_notify(plan, result):
            if plan.debug and not plan.has_notify_target:
                logger.debug("There is no Webhook URL defined.")
            return 0

        severity = "danger" if result.any_open else "good"
        return self.notifiers.deliver(self.title(), result.message, severity)
