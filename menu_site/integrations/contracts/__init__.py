"""
Contracts (data models).

This folder defines the request/response shapes for external integrations:
- catalog objects and inventory counts read from the catalog provider
- the normalized merch model served to the site
- checkout line items and payment-link requests

Both mock and real HTTP clients should use these contracts.
"""
