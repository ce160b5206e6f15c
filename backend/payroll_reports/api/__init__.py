"""HTTP surface: report routes, health probes, and the exception-to-envelope mapping."""
