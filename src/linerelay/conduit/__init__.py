"""
The conduit package provides an abstraction of a bi-directional stream.
Concrete implementations are a connected TCP socket and the process standard streams.
"""
