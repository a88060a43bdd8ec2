"""Plan resolution and orchestrated execution."""
