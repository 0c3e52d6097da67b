"""
hackasm - Configuration
=======================

Assembler configuration: output naming and the bounds of the target
machine's address space. Defaults describe the standard Hack platform:

- Address instructions carry a 15-bit address (0 to 32767)
- Variables live in data memory, whose highest slot is KBD (24576)
- Machine code files use the ".hack" suffix
"""

from dataclasses import dataclass


# Highest data-memory address (the keyboard register)
DEFAULT_POOL_TOP = 24576

# Width of the address field in an address instruction
DEFAULT_ADDRESS_BITS = 15

DEFAULT_OUTPUT_SUFFIX = ".hack"


@dataclass(frozen=True)
class AssemblerConfig:
    """
    Configuration for one Assembler instance.

    Attributes:
        output_suffix: Suffix swapped in for the input file's suffix when
                       no output path is given (default: ".hack")
        pool_top: Highest data-memory address that may hold a variable.
                  The free-register pool is [0, pool_top] (default: 24576)
        address_bits: Width of the address field (default: 15)
    """

    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    pool_top: int = DEFAULT_POOL_TOP
    address_bits: int = DEFAULT_ADDRESS_BITS

    def __post_init__(self) -> None:
        if not self.output_suffix.startswith("."):
            raise ValueError(f"output suffix must start with '.': {self.output_suffix!r}")
        if self.pool_top < 0:
            raise ValueError(f"pool_top must be non-negative: {self.pool_top}")
        if not 1 <= self.address_bits <= 15:
            raise ValueError(f"address_bits must be between 1 and 15: {self.address_bits}")

    @property
    def max_address(self) -> int:
        """Largest address encodable in the address field."""
        return (1 << self.address_bits) - 1
