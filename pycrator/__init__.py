"""pycrator -- scaffold new Python packages.

Creates the directory layout, build manifest, README, LICENSE, CI and
lint/format configuration for a new package, then initialises git, a virtual
environment and the development tools.
"""

__version__ = "0.1.0"
