"""
Domain name model used for zone and alias matching
"""

from typing import Iterable, Iterator, Tuple, Union

from dns import name as dns_name, exception as dns_exception


class DomainName:
    """Immutable, case-insensitive DNS name.

    Wraps a dnspython absolute name, so ``corp.example.com`` and
    ``CORP.Example.com.`` compare and hash equal.
    """

    __slots__ = ("_name",)

    def __init__(self, name: dns_name.Name):
        if not name.is_absolute():
            name = name.concatenate(dns_name.root)
        object.__setattr__(self, "_name", name)

    @classmethod
    def from_text(cls, text: Union[str, bytes, "DomainName"]) -> "DomainName":
        """Parse a name, raising ValueError for empty or malformed input"""
        if isinstance(text, DomainName):
            return text
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        text = text.strip()
        if not text or text == ".":
            raise ValueError("empty domain name")
        try:
            return cls(dns_name.from_text(text))
        except dns_exception.DNSException as e:
            raise ValueError(f"invalid domain name '{text}': {e}")

    @property
    def labels(self) -> Tuple[str, ...]:
        """Lower-cased labels without the root label"""
        return tuple(label.decode("ascii", errors="replace").lower()
                     for label in self._name.labels if label)

    def is_zone_of(self, other: "DomainName") -> bool:
        """True if self is an ancestor of, or equal to, ``other``"""
        return other._name.is_subdomain(self._name)

    def __setattr__(self, key, value):
        raise AttributeError("DomainName is immutable")

    def __eq__(self, other):
        if not isinstance(other, DomainName):
            return NotImplemented
        return self._name == other._name

    def __hash__(self):
        return hash(self._name)

    def __str__(self) -> str:
        return self._name.canonicalize().to_text(omit_final_dot=True)

    def __repr__(self) -> str:
        return f"DomainName('{self}')"


class ZoneSet:
    """Ordered, read-only set of corporate zones"""

    def __init__(self, zones: Iterable[Union[str, DomainName]]):
        self._zones: Tuple[DomainName, ...] = tuple(DomainName.from_text(z) for z in zones)

    def contains(self, name: DomainName) -> bool:
        return any(zone.is_zone_of(name) for zone in self._zones)

    def __iter__(self) -> Iterator[DomainName]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __str__(self) -> str:
        return ", ".join(str(z) for z in self._zones)
