"""
Template name constants.

Pure constants - no I/O or file system knowledge.
"""


class Template:
    """Template name constants. Use these instead of raw strings."""

    ROUTER_SYSTEM = "router_system"
    GENERATOR_SYSTEM = "generator_system"
    CREATE_COMPONENT = "create_component"
    UPDATE_COMPONENT = "update_component"
    REGENERATE_COMPONENT = "regenerate_component"
