"""Relays R2 upload notifications to Cloudflare Stream."""
