"""musicsync core package.

Modules:
- scanner: Artist/Album/Track crawl and resync
- metadata: tag-reader fallback chain for track titles
- artwork: cover art discovery
- store: SQLite index (wipe-and-rebuild, read queries)
- services: read-only query composition
- api: FastAPI app
- config: INI parsing and config object
"""

__version__ = "0.1.0"
