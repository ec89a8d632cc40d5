"""Application core: configuration, database, logging and errors."""
