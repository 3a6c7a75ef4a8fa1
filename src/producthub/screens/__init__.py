"""Native screens that host remotely defined page components."""
