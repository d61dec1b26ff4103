"""
Read-only check whether sapconf or saptune is set up correctly on a SLES host.
"""

__all__ = ["auditors", "findings", "policy", "system_state", "cli"]
__version__ = "1.2.0"
