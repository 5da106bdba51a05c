"""permlint: least-privilege linter for GitHub Actions job permissions."""

__version__ = "0.1.0"
