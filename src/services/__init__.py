"""Business logic services used by handlers.

Services are imported lazily by handlers so the Google client libraries are
only loaded on routes that talk to the ledger.
"""

# Do NOT import services here - use lazy loading in handlers instead
