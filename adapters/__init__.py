"""
Adapters package - External service connections.
HTTP adapters for OpenRouter, n8n and Supabase Auth.
"""

from adapters import n8n_client, openrouter_client, supabase_auth

__all__ = [
    "n8n_client",
    "openrouter_client",
    "supabase_auth",
]
