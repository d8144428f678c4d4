"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when no Square credentials are configured or INTEGRATIONS_MODE=mock.

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
"""
