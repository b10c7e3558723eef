"""Google Tag Manager API client, tools, prompts and resource URIs."""

__version__ = "0.1.0"