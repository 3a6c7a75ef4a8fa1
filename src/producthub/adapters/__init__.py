"""Stand-ins for third-party services (analytics, payments) and message routing glue."""
