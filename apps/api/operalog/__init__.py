"""OpéraLog fleet operations API."""
