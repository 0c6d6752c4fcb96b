import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, validator

from .errors import (
    ConfigError,
    InvalidPortSpecification,
    MissingProperty,
    NoPortSpecification,
    NotAnInteger,
    NotARange,
)

logger = logging.getLogger(__name__)

MIN_PORT = 1
MAX_PORT = 65535

_INTEGER = re.compile(r"[+-]?\d+")
PORT_FIELDS = ("ports_range", "ports_list")


class ScanPlan(BaseModel):
    """
    Validation model for one monitor run.
    Holds exactly one resolved port specification; an empty plan is rejected.
    """
    ports_range: Optional[Tuple[int, int]] = None
    ports_list: Optional[List[int]] = None
    notify_target: Optional[str] = None
    teams_target: Optional[str] = None
    verify_mode: bool = False
    debug: bool = False
    # None leaves the connect timeout to the network stack
    timeout: Optional[float] = Field(None, gt=0, le=60.0)

    class Config:
        frozen = True

    @validator('ports_range')
    def validate_range(cls, v):
        if v is None:
            return v
        start, end = v
        for port in (start, end):
            if not MIN_PORT <= port <= MAX_PORT:
                raise ValueError(f"Port {port} is outside {MIN_PORT}-{MAX_PORT}")
        if start > end:
            raise ValueError(f"Start port {start} is greater than end port {end}")
        return v

    @validator('ports_list', always=True)
    def validate_list(cls, v, values):
        if v is None:
            # A failed ports_range is absent from values and already reported
            if 'ports_range' in values and values['ports_range'] is None:
                raise ValueError("A port range or a port list is required")
            return v
        if not v:
            raise ValueError("The port list is empty")
        invalid = [p for p in v if not MIN_PORT <= p <= MAX_PORT]
        if invalid:
            raise ValueError(f"Ports {invalid} are outside {MIN_PORT}-{MAX_PORT}")
        return v

    @property
    def has_notify_target(self) -> bool:
        return bool(self.notify_target or self.teams_target)


@dataclass
class PortSelectors:
    """
    Raw selector values as given on the command line.
    In properties mode each value names a property instead of holding the ports.
    """
    port_range: str = ""
    port_list: str = ""
    start: str = ""
    end: str = ""


def parse_port(token: str, context: Optional[str] = None) -> int:
    token = token.strip()
    if not _INTEGER.fullmatch(token):
        raise NotAnInteger(token, context)
    return int(token)


def parse_range(value: str, selector: Optional[str] = None) -> Tuple[int, int]:
    """
    Parses "N-M" into (N, M). Only the first two '-' separated parts are used.
    """
    if "-" not in value:
        raise NotARange(value, selector)
    parts = value.split("-")
    if len(parts) < 2:
        raise NotARange(value, selector)
    start = parse_port(parts[0], f"start port of '{value}'")
    end = parse_port(parts[1], f"end port of '{value}'")
    return start, end


def build_plan(**fields) -> ScanPlan:
    try:
        return ScanPlan(**fields)
    except ValidationError as e:
        errors = e.errors()
        reasons = "; ".join(err.get("msg", "") for err in errors)
        if all(err.get("loc", ("",))[0] in PORT_FIELDS for err in errors):
            raise InvalidPortSpecification(f"Invalid port specification: {reasons}") from e
        raise ConfigError(f"Invalid configuration: {reasons}") from e


class ConfigResolver:
    """
    Turns selectors into a ScanPlan.

    Without properties the selectors are literal values (params mode). With
    properties, selectors are keys into that mapping (properties mode).
    First match wins: range, then list, then start/end.
    """

    def __init__(self, properties: Optional[Dict[str, str]] = None):
        self.properties = properties

    @property
    def properties_mode(self) -> bool:
        return self.properties is not None

    def _lookup(self, selector: str, what: str) -> str:
        if not self.properties_mode:
            return selector
        try:
            return self.properties[selector]
        except KeyError:
            raise MissingProperty(selector, what) from None

    def resolve(self, selectors: PortSelectors, **options) -> ScanPlan:
        ports_range = None
        ports_list = None

        if selectors.port_range:
            value = self._lookup(selectors.port_range, "port range")
            ports_range = parse_range(value, selectors.port_range)
        elif selectors.port_list:
            ports_list = self._resolve_list(selectors.port_list)
        elif selectors.start and selectors.end:
            start = parse_port(
                self._lookup(selectors.start, "start port"),
                f"start port of '{selectors.start}'",
            )
            end = parse_port(
                self._lookup(selectors.end, "end port"),
                f"end port of '{selectors.end}'",
            )
            ports_range = (start, end)
        else:
            raise NoPortSpecification()

        return build_plan(ports_range=ports_range, ports_list=ports_list, **options)

    def _resolve_list(self, selector: str) -> List[int]:
        if not self.properties_mode:
            return self._parse_lenient_list(selector)

        ports = []
        if "," in selector:
            # Each token names a property holding a single port
            for key in selector.split(","):
                key = key.strip()
                value = self._lookup(key, "port")
                ports.append(parse_port(value, f"port list member '{key}' of '{selector}'"))
        else:
            value = self._lookup(selector, "port list")
            for token in value.split(","):
                ports.append(parse_port(token, f"port list element of '{selector}'"))
        return ports

    @staticmethod
    def _parse_lenient_list(value: str) -> List[int]:
        ports = []
        for token in value.split(","):
            try:
                ports.append(parse_port(token))
            except NotAnInteger:
                logger.warning("The port '%s' of '%s' is not an integer, skipping it.", token, value)
        if not ports:
            raise NoPortSpecification(f"There is no valid port in the port list '{value}'.")
        return ports


def resolve_params(selectors: PortSelectors, **options) -> ScanPlan:
    return ConfigResolver().resolve(selectors, **options)


def resolve_properties(properties: Dict[str, str], selectors: PortSelectors, **options) -> ScanPlan:
    return ConfigResolver(properties).resolve(selectors, **options)
