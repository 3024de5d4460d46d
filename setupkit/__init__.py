"""setupkit: a simple package installer for Windows.

Packages are described declaratively in a registry (download URLs per
architecture, installer kind, post-install shims and shortcuts). The install
pipeline:
- Resolves the target architecture once per run
- Picks and downloads the installer (64-bit falls back to 32-bit)
- Unpacks a container archive around the real installer when declared
- Runs the installer strategy for the entry's kind
- Creates command-line shims and start-menu shortcuts
"""

__all__ = []
