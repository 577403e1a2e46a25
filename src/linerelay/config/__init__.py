"""
Layered configuration files for the relay, validated against a schema.
"""
