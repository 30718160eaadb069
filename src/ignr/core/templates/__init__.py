"""
Template Package

Embedded templates, the remote template client and the template manager.
"""

from ignr.core.templates.embedded import EMBEDDED_TEMPLATE_NAMES, load_embedded, seed_templates
from ignr.core.templates.remote import SyncResult, TemplateClient
from ignr.core.templates.manager import SECTION_MARKER, TemplateManager

__all__ = [
    "EMBEDDED_TEMPLATE_NAMES",
    "load_embedded",
    "seed_templates",
    "SyncResult",
    "TemplateClient",
    "SECTION_MARKER",
    "TemplateManager",
]
