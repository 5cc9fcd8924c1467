from rich.console import Console
from rich.table import Table

from addrpool.host import list_host_addresses
from addrpool.pool import BLOCK_WEIGHTS, AddressPool, new_pool

console = Console()


class PoolController:
    """Runs pool commands for the CLI and renders the results."""

    def __init__(self, config: dict | None = None):
        self.config = config or {}
        self._pool: AddressPool | None = None

    @property
    def pool(self) -> AddressPool:
        if self._pool is None:
            self._pool = new_pool(self.config)
        return self._pool

    def allocate(self, count: int = 1) -> list[str]:
        """Allocate count addresses. Returns the addresses handed out."""
        addresses = []
        try:
            for _ in range(count):
                addresses.append(self.pool.get())
        finally:
            if addresses:
                table = Table(title="Allocated Addresses")
                table.add_column("#", style="dim")
                table.add_column("Address", style="green")
                for i, address in enumerate(addresses, 1):
                    table.add_row(str(i), address)
                console.print(table)
        return addresses

    def host(self) -> None:
        """Show host interface addresses and the block each one occupies."""
        addresses = list_host_addresses()
        if not addresses:
            console.print("No interface addresses found.")
            return

        table = Table(title="Host Addresses")
        table.add_column("Interface", style="cyan")
        table.add_column("Address", style="green")
        table.add_column("Reserves")

        for addr in addresses:
            reserves = "-"
            if addr.is_ipv4:
                parts = addr.address.split(".")
                if parts[0] in BLOCK_WEIGHTS:
                    reserves = ".".join(parts[0:3])
            table.add_row(addr.ifname, str(addr), reserves)

        console.print(table)

    def status(self) -> None:
        """Show block weights and allocation counters."""
        snap = self.pool.snapshot()

        table = Table(title="Address Blocks")
        table.add_column("Block", style="cyan")
        table.add_column("Weight", justify="right")
        for block, weight in snap["weights"].items():
            table.add_row(block, str(weight))
        console.print(table)

        attempts = snap["max_attempts"]
        console.print(f"[bold]Allocated:[/bold] {len(snap['allocated'])}")
        console.print(f"[bold]Ceiling:[/bold] {snap['ceiling']}")
        console.print(f"[bold]Max attempts:[/bold] {attempts if attempts is not None else 'unbounded'}")
        if snap["allocated"]:
            console.print(f"[bold]Reserved:[/bold] {', '.join(snap['allocated'])}")

