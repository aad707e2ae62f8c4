"""docbundle: searchable catalogs from MkDocs documentation monorepos."""

__version__ = "0.1.0"
