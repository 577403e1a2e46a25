"""
Line relay between the terminal and a TCP endpoint.

- Conduit: abstraction of a bi-directional channel. Combines 2 streams for reading and writing.
  SocketConduit wraps the connection, StdioConduit the process standard streams.
- Connector: establishes the socket conduit to an Endpoint within a connect timeout.
  A single attempt is made; failures are ConnectTimeoutError or ConnectNetworkError.
- Session: owns the connection and the CancellationSignal shared by the two relays.
- Relays: `send` copies lines from standard input to the connection, `read` copies lines from
  the connection to standard output. Every line is re-terminated with a single newline.
- Coordinator: opens the session, runs both relays on worker threads, waits for both,
  then closes the connection.


## Threading

Each relay is a plain blocking loop on its own thread. The only state they share is the connection
(one reads, the other writes) and the cancellation signal.

Cancellation is cooperative. The signal is checked before each read, so a relay blocked in a read only
notices it when the read returns. To keep that bounded, setting the signal shuts down the socket, which
ends a blocked socket read, and standard input is polled with select() where the platform allows it.

There are no read or write timeouts once connected; a silent peer keeps the session open.
"""

__version__ = "0.1.0"
