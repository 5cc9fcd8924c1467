import logging
import random
import threading

from addrpool.host import list_host_addresses


logger = logging.getLogger(__name__)

# 172.{25-31}.x.x and 192.168.x.x, weighted by second-octet richness
BLOCK_WEIGHTS = {
    "172": 255 * 255,
    "192": 1 * 255,
}
MAX_ALLOCATED = 60000
DEFAULT_MAX_ATTEMPTS = 100_000


class PoolError(Exception):
    pass


class PoolExhausted(PoolError):
    pass


def pick_weighted(weights: dict[str, int], rng) -> str | None:
    """Pick a key from weights with probability proportional to its value."""
    total = sum(weights.values())
    if total <= 0:
        return None

    r = rng.randrange(total)
    for key, weight in weights.items():
        r -= weight
        if r <= 0:
            return key
    return None


class AddressPool:
    """Hands out unique private addresses, avoiding ranges the host already uses.

    The pool is primed once from the host's interface addresses: every IPv4
    address in a known block reserves its first three octets and takes one
    unit of weight from that block. After that, get() may be called from any
    number of threads.
    """

    def __init__(
        self,
        inspector=None,
        rng: random.Random | None = None,
        ceiling: int = MAX_ALLOCATED,
        max_attempts: int | None = DEFAULT_MAX_ATTEMPTS,
    ):
        self.allocated: set[str] = set()
        self.weights = dict(BLOCK_WEIGHTS)
        self.ceiling = ceiling
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._scan_host(inspector or list_host_addresses)

    def _scan_host(self, inspector) -> None:
        try:
            addresses = inspector()
        except Exception as e:
            logger.warning("Could not read host interfaces, using default weights: %s", e)
            return

        for addr in addresses:
            if not addr.is_ipv4:
                continue
            parts = addr.address.split(".")
            block = parts[0]
            if block not in self.weights:
                continue

            prefix = ".".join(parts[0:3])
            self.allocated.add(prefix)
            self.weights[block] -= 1
            logger.debug("Host %s uses %s, reserving %s", addr.ifname, addr.address, prefix)

    def generate(self) -> str | None:
        """Propose a candidate address; None when no block has weight left."""
        block = pick_weighted(self.weights, self._rng)
        if block is None:
            return None
        if block == "192":
            return block + ".168"
        if block == "172":
            # 172.31 is valid too but never proposed
            return f"{block}.{25 + self._rng.randrange(6)}"
        return block

    def get(self) -> str:
        """Allocate an address that this pool has never returned before."""
        with self._lock:
            if len(self.allocated) > self.ceiling:
                logger.warning("Pool exhausted: %d addresses allocated", len(self.allocated))
                raise PoolExhausted("no available IPs")

            attempts = 0
            while True:
                candidate = self.generate()
                if candidate is None:
                    raise PoolExhausted("no address block has capacity left")
                if candidate not in self.allocated:
                    break
                attempts += 1
                if self.max_attempts is not None and attempts >= self.max_attempts:
                    logger.warning(
                        "Pool exhausted: %d candidates in a row were already taken", attempts
                    )
                    raise PoolExhausted(
                        f"no unused address found after {attempts} attempts"
                    )

            self.allocated.add(candidate)
            logger.debug("Allocated %s", candidate)
            return candidate

    def snapshot(self) -> dict:
        """Return a copy of the pool state."""
        with self._lock:
            return {
                "allocated": sorted(self.allocated),
                "weights": dict(self.weights),
                "ceiling": self.ceiling,
                "max_attempts": self.max_attempts,
            }

    def __len__(self) -> int:
        return len(self.allocated)

    def __contains__(self, address: str) -> bool:
        return address in self.allocated


def new_pool(config: dict | None = None) -> AddressPool:
    """Build a pool from the live host, sized by the 'pool' config section."""
    settings = (config or {}).get("pool", {})
    return AddressPool(
        ceiling=settings.get("ceiling", MAX_ALLOCATED),
        max_attempts=settings.get("max_attempts", DEFAULT_MAX_ATTEMPTS),
    )
