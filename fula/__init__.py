"""Storage-pool node components: settings, seed storage, block datastore, CIDs, block tracking and RPC."""

__version__ = "0.1.0"