"""
package: mstair.pp.base
"""

# <AUTOGEN_INIT>
from mstair.pp.base import (
    config,
    fs_helpers,
    types,
)


__all__ = [
    "config",
    "fs_helpers",
    "types",
]
# </AUTOGEN_INIT>
