"""Protocol definitions for external libraries.

These protocols allow typed access to external library objects
without importing the libraries at module level.
"""

from __future__ import annotations
