"""smart-release - release automation for multi-package workspaces.

Inspects git history to segment it into releases per package:
- Linearizes commit ancestry once per invocation
- Maps version tags to the commits they point at
- Decides per commit whether it touched a package's subtree
- Renders changelog previews from the resulting segments
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
