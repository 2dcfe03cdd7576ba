"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (console, configuration files,
logging) by implementing the interfaces defined in the domain layer.
"""
