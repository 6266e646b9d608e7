"""
Source scanners producing usage and declaration events.
"""

from ngrequire.sources.templates import binding_name, scan_template
from ngrequire.sources.typescript import ComponentSourceScanner

__all__ = [
    "ComponentSourceScanner",
    "binding_name",
    "scan_template",
]
