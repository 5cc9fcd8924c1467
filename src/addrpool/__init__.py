from addrpool.host import HostError, InterfaceAddress, list_host_addresses
from addrpool.pool import AddressPool, PoolError, PoolExhausted, new_pool, pick_weighted

__version__ = "0.1.0"
