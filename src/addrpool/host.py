import socket
from dataclasses import dataclass

from pyroute2 import IPRoute
from pyroute2.netlink.exceptions import NetlinkError


class HostError(Exception):
    pass


@dataclass(frozen=True)
class InterfaceAddress:
    """One address assigned to a host network interface."""

    ifname: str
    address: str
    prefixlen: int
    family: int = socket.AF_INET

    @property
    def is_ipv4(self) -> bool:
        return self.family == socket.AF_INET

    def __str__(self) -> str:
        return f"{self.address}/{self.prefixlen}"


def _address_of(msg) -> str | None:
    # IFA_ADDRESS is the peer on point-to-point links, prefer IFA_LOCAL
    return msg.get_attr("IFA_LOCAL") or msg.get_attr("IFA_ADDRESS")


def list_host_addresses() -> list[InterfaceAddress]:
    """Read every address assigned to a host interface over netlink."""
    ipr = None
    try:
        ipr = IPRoute()
        names = {
            link["index"]: link.get_attr("IFLA_IFNAME")
            for link in ipr.get_links()
        }
        addresses = []
        for msg in ipr.get_addr():
            address = _address_of(msg)
            if not address:
                continue
            addresses.append(InterfaceAddress(
                ifname=names.get(msg["index"], str(msg["index"])),
                address=address,
                prefixlen=msg["prefixlen"],
                family=msg["family"],
            ))
        return addresses
    except (NetlinkError, OSError) as e:
        raise HostError(f"Failed to list host interfaces: {e}") from e
    finally:
        if ipr is not None:
            ipr.close()
