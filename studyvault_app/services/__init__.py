"""Store and cache services shared by the modules."""
