"""
Record probes. Each run() takes a domain and the resolver (and fetcher for MTA-STS)
and returns a typed result; DNS failures are returned as data, never raised.
"""
