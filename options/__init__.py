"""Schema-driven option namespaces: schema, service and errors."""
