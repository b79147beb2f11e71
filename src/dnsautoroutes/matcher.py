"""
Zone/alias matching engine

Decides, for every DNS answer, whether the resolved address must be routed via
the VPN gateway and whether the owner name must be recorded in the query log.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from ipaddress import IPv4Address
from typing import Callable, Iterable, Iterator, Optional, Union

from .exceptions import RouteInstallError, StoreError
from .names import DomainName, ZoneSet
from .packet import DNSMessage
from .utils.logger import get_logger

RouteCallback = Callable[[IPv4Address], object]
QueryCallback = Callable[[DomainName], object]


class AliasSet:
    """CNAME targets of corporate names.

    Unbounded by default. With a capacity, the least recently seen alias is
    evicted first; membership checks refresh recency.
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity <= 0:
            capacity = None
        self.capacity = capacity
        self._aliases: "OrderedDict[DomainName, None]" = OrderedDict()
        self.evictions = 0

    def add(self, name: DomainName) -> None:
        if name in self._aliases:
            self._aliases.move_to_end(name)
            return
        self._aliases[name] = None
        if self.capacity is not None and len(self._aliases) > self.capacity:
            self._aliases.popitem(last=False)
            self.evictions += 1

    def __contains__(self, name: DomainName) -> bool:
        if name not in self._aliases:
            return False
        if self.capacity is not None:
            self._aliases.move_to_end(name)
        return True

    def __iter__(self) -> Iterator[DomainName]:
        return iter(list(self._aliases))

    def __len__(self) -> int:
        return len(self._aliases)


@dataclass
class RoutingContext:
    """State owned by one matching engine: zones, aliases and the gateway"""
    zones: ZoneSet
    target: IPv4Address
    aliases: AliasSet = field(default_factory=AliasSet)

    @classmethod
    def create(cls, target: Union[str, IPv4Address], zones: Iterable[str],
               alias_capacity: Optional[int] = None) -> 'RoutingContext':
        return cls(
            zones=ZoneSet(zones),
            target=IPv4Address(str(target)),
            aliases=AliasSet(alias_capacity),
        )

    def is_corp(self, name: DomainName) -> bool:
        return self.zones.contains(name)


@dataclass(frozen=True)
class MatchResult:
    is_corp: bool
    is_alias: bool
    routed: bool = False


class Matcher:
    """Turns DNS answers into route intents and query log intents."""

    def __init__(self, context: RoutingContext,
                 on_route: RouteCallback,
                 on_query: Optional[QueryCallback] = None):
        self.context = context
        self.on_route = on_route
        self.on_query = on_query
        self.logger = get_logger(__name__)
        self.stats = {
            'responses': 0,
            'answers': 0,
            'route_intents': 0,
            'query_intents': 0,
            'aliases_added': 0,
        }

    def process_response(self, message: DNSMessage) -> None:
        """Evaluate every answer of a response, in order"""
        if not message.is_response:
            return
        self.stats['responses'] += 1
        for answer in message.answers:
            self.process_answer(answer.name, answer.rtype, answer.data)

    def process_answer(self, owner: DomainName, record_type: str, record_data) -> MatchResult:
        self.stats['answers'] += 1
        is_corp = self.context.is_corp(owner)
        is_alias = owner in self.context.aliases

        if is_corp:
            self._log_query(owner)

        routed = False
        if record_type == "A" and isinstance(record_data, IPv4Address):
            self.logger.debug(f"Answer: {owner} A {record_data}")
            if is_corp or is_alias:
                self._route(owner, record_data)
                routed = True
        elif record_type == "CNAME" and isinstance(record_data, DomainName):
            self.logger.debug(f"Answer: {owner} CNAME {record_data}")
            if is_corp:
                if record_data not in self.context.aliases:
                    self.stats['aliases_added'] += 1
                    self.logger.info(f"New alias {record_data} (via {owner})")
                self.context.aliases.add(record_data)

        return MatchResult(is_corp=is_corp, is_alias=is_alias, routed=routed)

    def _route(self, owner: DomainName, address: IPv4Address) -> None:
        self.stats['route_intents'] += 1
        try:
            self.on_route(address)
        except RouteInstallError as e:
            self.logger.warning(f"Route for {owner} ({address}) not installed: {e}")

    def _log_query(self, owner: DomainName) -> None:
        if self.on_query is None:
            return
        self.stats['query_intents'] += 1
        try:
            self.on_query(owner)
        except StoreError as e:
            self.logger.warning(f"Failed to record query for {owner}: {e}")

    def get_stats(self) -> dict:
        stats = self.stats.copy()
        stats['aliases'] = len(self.context.aliases)
        stats['alias_evictions'] = self.context.aliases.evictions
        return stats
