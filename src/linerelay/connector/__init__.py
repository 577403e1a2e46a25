"""
The connector establishes a conduit to an endpoint, reporting connection state changes as events.

A connector can be thought of as a conduit factory with a lifecycle.
"""
