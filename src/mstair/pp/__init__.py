"""
package: mstair.pp
"""

__version__ = "0.1.0"

# <AUTOGEN_INIT>
from mstair.pp import (
    base,
    demo,
    xlogging,
    xprint,
)


__all__ = [
    "base",
    "demo",
    "xlogging",
    "xprint",
]
# </AUTOGEN_INIT>
