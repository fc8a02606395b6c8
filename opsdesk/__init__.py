"""
Operator tooling for the Infinity Weekends back office.

One-shot diagnostic and data-repair tasks: each connects to the document
store, the SMTP server or the application's HTTP API, performs a fixed set of
operations, prints a report and releases the connection.
"""

__version__ = "0.1.0"
