"""
package: mstair.pp.xprint
"""

# <AUTOGEN_INIT>
from mstair.pp.xprint import (
    classifier,
    hook_registry,
    introspection,
    key_order,
    layout,
    model,
    printer,
    printer_config,
    references,
    renderer,
    xprint_api,
)


__all__ = [
    "classifier",
    "hook_registry",
    "introspection",
    "key_order",
    "layout",
    "model",
    "printer",
    "printer_config",
    "references",
    "renderer",
    "xprint_api",
]
# </AUTOGEN_INIT>
