"""Built-in initializer adapters."""
