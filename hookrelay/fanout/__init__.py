"""Fan-out package.

Relays one inbound provider event to every registered endpoint and reports
which deliveries succeeded.
"""
