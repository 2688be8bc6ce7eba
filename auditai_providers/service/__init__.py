"""HTTP service and command line surfaces."""
