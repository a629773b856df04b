"""Discord adapter: payload helpers, REST client and event service."""
