"""
Exception types for DNS Auto Routes
"""


class DNSAutoRoutesError(Exception):
    """Base class for all dnsautoroutes errors"""


class DecodeError(DNSAutoRoutesError):
    """Malformed link frame or DNS message"""


class CaptureError(DNSAutoRoutesError):
    """Capture device could not be opened or read"""


class RouteInstallError(DNSAutoRoutesError):
    """Route command failed or could not be invoked"""

    def __init__(self, address: str, message: str):
        super().__init__(f"{address}: {message}")
        self.address = address
        self.message = message


class StoreError(DNSAutoRoutesError):
    """Query log persistence failure"""


class ResolutionError(DNSAutoRoutesError):
    """Forward resolution of a replayed host failed"""

    def __init__(self, host: str, message: str):
        super().__init__(f"{host}: {message}")
        self.host = host
        self.message = message
