"""lawflow.

Rule-based workflow automation for a multi-tenant legal practice platform:
- domain events trigger tenant-owned workflows
- each workflow runs an ordered list of conditioned actions
- results are reported per step, best-effort rather than transactional
"""

__version__ = "0.1.0"

from lawflow.core.config import LawflowConfig

__all__ = ["__version__", "LawflowConfig"]
