"""
Export settings.

Switches that change which code path the OBJ export takes; none of them
is an error condition.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class ExportSettings:
    """
    Configuration for one export pass.

    Attributes:
        writable_vertices: Give every face corner its own vertex so vertices
            can be moved individually after import (bigger mesh)
        depth_buffer_enabled: Give each tile face a depth based on its
            vertical position instead of 0
        texel_bias: Denominator of the inward UV tuck that hides seams
            between tiles; 0 disables the tuck
    """
    writable_vertices: bool = False
    depth_buffer_enabled: bool = False
    texel_bias: float = 0

    def __post_init__(self):
        if self.texel_bias < 0:
            raise ValueError(f"texel_bias must be 0 or positive, got {self.texel_bias}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
