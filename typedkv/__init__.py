"""
typed-kv: Typed In-Memory Key-Value Store

A small in-memory key-value server speaking a line-oriented text
protocol over raw TCP sockets. Values are either numbers or text,
inferred from the literal sent by the client.
"""

__version__ = "0.1.0"
