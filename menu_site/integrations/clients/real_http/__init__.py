"""
Real HTTP integration clients.

These clients talk to Square and Spotify over HTTP.

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to menu_site/integrations/contracts/*
"""
